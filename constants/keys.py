class StorageKeys:
    """Keys of the durable records kept in the persistence store."""

    PROGRESS = "study_progress"
    COMPLETED = "study_completed"


class StateKeys:
    """Keys for data stored in ``st.session_state``."""

    RUNTIME = "study.runtime"
    WIDGET_GENERATION = "study.widget_generation"
    SUBMISSION = "study.submission"
    FLASH_MESSAGE = "study.flash_message"
    SCROLL_TO_TOP = "_study_scroll_to_top"


class ElementNames:
    """Naming contract between the markup generator and the wizard runtime."""

    PREFIX = "q_"
    OTHER_VALUE = "other"
    OTHER_INPUT_CLASS = "other-input"
    OTHER_SNAPSHOT_SUFFIX = "_other"
    OTHER_EXPORT_SUFFIX = " (Other)"

    @classmethod
    def question(cls, question_id: str) -> str:
        return f"{cls.PREFIX}{question_id}"

    @classmethod
    def option(cls, question_id: str, index: int) -> str:
        return f"{cls.PREFIX}{question_id}_{index}"

    @classmethod
    def checkbox(cls, question_id: str, index: int, option_count: int) -> str:
        """Return the element id of a checkbox option.

        Single-option checkbox questions use the bare question name; multi
        option questions append the option index.
        """

        if option_count == 1:
            return cls.question(question_id)
        return cls.option(question_id, index)

    @staticmethod
    def page(page_number: int) -> str:
        return f"page{page_number}"

    @staticmethod
    def next_button(page_number: int) -> str:
        return f"nextBtn{page_number}"

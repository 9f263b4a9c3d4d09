"""Central configuration for the study wizard.

Settings are read from the environment; a ``.env`` file in the working
directory is loaded first when python-dotenv is installed. The defaults run the
wizard against ``export.json`` with a file-backed store in ``.study_store``.

Reference deployment (the original ten-page study) pins the validation gates
explicitly::

    STUDY_CONSENT_ELEMENT_ID=q_2138434720
    STUDY_EVALUATION_PAGES=5,7,9
    STUDY_SELECTION_SUFFIXES=635,265,845

Without these variables the gates are derived from the form description.
"""

import logging
import os
import warnings
from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping

try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


logger = logging.getLogger(__name__)


_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")

DEFAULT_FORM_PATH = "export.json"
DEFAULT_STORE_DIR = ".study_store"
DEFAULT_AUTOSAVE_INTERVAL = 5.0
DEFAULT_LOG_LEVEL = "INFO"


class StoreBackend(StrEnum):
    """Enumerate the supported persistence store backends."""

    FILE = "file"
    SESSION = "session"
    MEMORY = "memory"


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _parse_positive_float_env(value: str | None, *, env_var: str, default: float) -> float:
    """Return a positive number parsed from ``value`` or ``default``."""

    candidate = _clean(value)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        warnings.warn(
            "%s is not a number; ignoring %s" % (candidate, env_var),
            RuntimeWarning,
        )
        return default
    if parsed <= 0:
        warnings.warn(
            "%s must be positive; ignoring %s" % (env_var, candidate),
            RuntimeWarning,
        )
        return default
    return parsed


def _parse_page_list(value: str | None, *, env_var: str) -> frozenset[int] | None:
    """Parse a comma separated list of page numbers."""

    candidate = _clean(value)
    if candidate is None:
        return None
    pages: set[int] = set()
    for token in candidate.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            page = int(token)
        except ValueError:
            warnings.warn(
                "Unsupported %s entry '%s'; skipping." % (env_var, token),
                RuntimeWarning,
            )
            continue
        if page < 1:
            warnings.warn(
                "%s entries must be >= 1; skipping %s." % (env_var, page),
                RuntimeWarning,
            )
            continue
        pages.add(page)
    return frozenset(pages)


def _parse_csv(value: str | None) -> tuple[str, ...]:
    candidate = _clean(value)
    if candidate is None:
        return ()
    return tuple(token.strip() for token in candidate.split(",") if token.strip())


def _coerce_store_backend(value: str | None) -> StoreBackend:
    candidate = _clean(value)
    if candidate is None:
        return StoreBackend.FILE
    try:
        return StoreBackend(candidate.lower())
    except ValueError:
        warnings.warn(
            "Unknown STUDY_STORE_BACKEND '%s'; falling back to 'file'." % candidate,
            RuntimeWarning,
        )
        return StoreBackend.FILE


@dataclass(frozen=True)
class StudySettings:
    """Resolved runtime settings for the wizard, generator and exporter."""

    form_path: str = DEFAULT_FORM_PATH
    markup_path: str | None = None
    store_backend: StoreBackend = StoreBackend.FILE
    store_dir: str = DEFAULT_STORE_DIR
    export_dir: str | None = None
    autosave_interval: float = DEFAULT_AUTOSAVE_INTERVAL
    consent_element_id: str | None = None
    evaluation_pages: frozenset[int] | None = None
    selection_suffixes: tuple[str, ...] = ()
    log_level: str = DEFAULT_LOG_LEVEL
    debug: bool = False
    google_forms_access_token: str | None = None


def get_settings(environ: Mapping[str, str] | None = None) -> StudySettings:
    """Return :class:`StudySettings` resolved from ``environ`` (default ``os.environ``)."""

    env = os.environ if environ is None else environ
    settings = StudySettings(
        form_path=_clean(env.get("STUDY_FORM_PATH")) or DEFAULT_FORM_PATH,
        markup_path=_clean(env.get("STUDY_MARKUP_PATH")),
        store_backend=_coerce_store_backend(env.get("STUDY_STORE_BACKEND")),
        store_dir=_clean(env.get("STUDY_STORE_DIR")) or DEFAULT_STORE_DIR,
        export_dir=_clean(env.get("STUDY_EXPORT_DIR")),
        autosave_interval=_parse_positive_float_env(
            env.get("STUDY_AUTOSAVE_INTERVAL"),
            env_var="STUDY_AUTOSAVE_INTERVAL",
            default=DEFAULT_AUTOSAVE_INTERVAL,
        ),
        consent_element_id=_clean(env.get("STUDY_CONSENT_ELEMENT_ID")),
        evaluation_pages=_parse_page_list(env.get("STUDY_EVALUATION_PAGES"), env_var="STUDY_EVALUATION_PAGES"),
        selection_suffixes=_parse_csv(env.get("STUDY_SELECTION_SUFFIXES")),
        log_level=(_clean(env.get("STUDY_LOG_LEVEL")) or DEFAULT_LOG_LEVEL).upper(),
        debug=_is_truthy_flag(env.get("STUDY_DEBUG")),
        google_forms_access_token=_clean(env.get("GOOGLE_FORMS_ACCESS_TOKEN")),
    )
    logger.debug("Resolved study settings: backend=%s store_dir=%s", settings.store_backend, settings.store_dir)
    return settings


__all__ = [
    "DEFAULT_AUTOSAVE_INTERVAL",
    "DEFAULT_FORM_PATH",
    "DEFAULT_STORE_DIR",
    "StoreBackend",
    "StudySettings",
    "get_settings",
]

"""CLI for generating the static study wizard markup."""

from __future__ import annotations

import argparse
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """Read a form description and write the wizard HTML.

    Example::

        python -m cli.generate_study --input export.json --output user_study_complete.html
    """

    parser = argparse.ArgumentParser(description="Study wizard markup generator")
    parser.add_argument("--input", default="export.json", help="Path to the form description JSON")
    parser.add_argument("--output", default="user_study_complete.html", help="Where to write the HTML")
    parser.add_argument("--stylesheet", default="forms_styles.css", help="Stylesheet href")
    parser.add_argument("--image-src", default="park.jpg", help="Fallback src for image items")
    args = parser.parse_args(argv)

    from config import get_settings
    from core.errors import FormDocumentError
    from generators.study_html import render_study_html
    from infra.logging import configure_logging
    from models.form import load_form_document
    from wizard.validation import ValidationPolicy

    settings = get_settings()
    configure_logging(settings.log_level, debug=settings.debug)

    try:
        document = load_form_document(args.input)
    except FormDocumentError as exc:
        raise SystemExit(str(exc))

    policy = ValidationPolicy.from_settings(document, settings)
    markup = render_study_html(
        document,
        gated_pages=policy.gated_pages(document.total_pages),
        stylesheet=args.stylesheet,
        image_source=args.image_src,
    )
    output = Path(args.output)
    output.write_text(markup, encoding="utf-8")

    print("Study wizard HTML generated successfully!")
    print(f"File saved as: {output}")
    print(f"Generated {document.total_pages} pages with {document.question_count} total questions.")


if __name__ == "__main__":  # pragma: no cover
    main()

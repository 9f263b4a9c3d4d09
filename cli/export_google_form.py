"""CLI for converting a Google Form into the study form description."""

from __future__ import annotations

import argparse
import json
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """Write ``export.json`` from a Forms API resource.

    Either convert a saved API response or fetch the form directly with an
    OAuth access token taken from ``GOOGLE_FORMS_ACCESS_TOKEN``::

        python -m cli.export_google_form --resource form.json
        python -m cli.export_google_form --form-id 1FAIpQLS...
    """

    parser = argparse.ArgumentParser(description="Google Forms to study form description")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--resource", help="Path to a saved Forms API form resource")
    source.add_argument("--form-id", help="Form id to fetch from the Forms API")
    parser.add_argument("--output", default="export.json", help="Where to write the form description")
    args = parser.parse_args(argv)

    from config import get_settings
    from core.errors import FormDocumentError, FormsExportError
    from infra.logging import configure_logging
    from integrations.google_forms import convert_form, fetch_form

    settings = get_settings()
    configure_logging(settings.log_level, debug=settings.debug)

    try:
        if args.resource:
            resource = json.loads(Path(args.resource).read_text(encoding="utf-8"))
        else:
            resource = fetch_form(args.form_id, access_token=settings.google_forms_access_token or "")
        document = convert_form(resource)
    except (OSError, json.JSONDecodeError, FormsExportError, FormDocumentError) as exc:
        raise SystemExit(f"Error exporting form: {exc}")

    output = Path(args.output)
    output.write_text(json.dumps(document.to_payload(), ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Exported {document.total_pages} pages with {document.question_count} questions to {output}")


if __name__ == "__main__":  # pragma: no cover
    main()

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from statement_pipeline.categorization.models import Category
from statement_pipeline.config.settings import Settings
from statement_pipeline.logging.logger import Log
from statement_pipeline.pipeline.models import StatementDocument
from statement_pipeline.pipeline.orchestrator import build_orchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate a bank statement PDF and extract its transactions as JSON"
    )
    parser.add_argument("pdf_path", type=Path, help="Statement PDF file path")
    parser.add_argument("--bank", required=True, help="Expected bank name")
    parser.add_argument("--month", required=True, help="Expected statement month, e.g. March")
    parser.add_argument("--year", required=True, help="Expected statement year, e.g. 2024")
    parser.add_argument(
        "--category",
        action="append",
        default=[],
        dest="categories",
        metavar="NAME",
        help="User category name; may be repeated",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build orchestrator -> run one statement."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    # stdout carries the JSON result
    Log.configure(settings.log_level, stream=sys.stderr)

    document = StatementDocument(raw_bytes=args.pdf_path.read_bytes(), filename=args.pdf_path.name)
    orchestrator = build_orchestrator(settings)
    result = orchestrator.process_statement(
        document,
        bank_name=args.bank,
        month=args.month,
        year=args.year,
        user_categories=[Category(name=name) for name in args.categories],
    )
    print(json.dumps(asdict(result), indent=2, default=str))
    return 0 if result.succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())

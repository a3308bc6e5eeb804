"""Command-line entrypoint for the pre-market report."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .errors import PremarketError
from .pipeline import ReportPipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="premarket", description="Pre-market report generator")
    sub = parser.add_subparsers(dest="command")

    generate = sub.add_parser("generate", help="Collect data, synthesize and deliver the report")
    generate.add_argument("--config", default="config.yaml", help="Path to the YAML settings file")
    generate.add_argument("--dry-run", action="store_true", help="Build the report without sending email")
    generate.add_argument("--output", help="Also write the rendered HTML to this path")
    generate.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    sections = sub.add_parser("sections", help="List the report section taxonomy")
    sections.add_argument("--config", default="config.yaml", help="Path to the YAML settings file")

    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _generate(args: argparse.Namespace) -> int:
    deliver = not args.dry_run
    try:
        config = load_config(args.config)
        pipeline = ReportPipeline.from_config(config, deliver=deliver)
        result = pipeline.run(deliver=deliver)
    except PremarketError as exc:
        logger.error(f"Error generating report: {exc}")
        return 1

    if args.output:
        path = Path(args.output)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(result.html, encoding="utf-8")
        except OSError as exc:
            logger.error(f"Error writing report: {exc}")
            return 1
        logger.info(f"Wrote report HTML to {path}")
    return 0


def _list_sections(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except PremarketError as exc:
        logger.error(str(exc))
        return 1
    for ordinal, spec in enumerate(config.sections, 1):
        print(f"{ordinal}. {spec.title}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "generate":
        _configure_logging(args.log_level)
        return _generate(args)
    if args.command == "sections":
        _configure_logging("WARNING")
        return _list_sections(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line driver: render a report JSON file to PDF.

Usage:
    python generate_report.py report.json [-o output.pdf]
"""

import argparse
import json
import sys
from pathlib import Path

from inspection_report.reporting import DocumentComposer, generate_report
from utils.config import config
from utils.logger import print_banner, print_error, print_summary_panel, setup_logger
from utils.validators import sanitize_filename

log_file = config.get_log_dir() / "report_engine.log" if config.log_to_file else None
logger = setup_logger(__name__, level=config.log_level, log_file=log_file, component="CLI")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate an inspection report PDF from a JSON document."
    )
    parser.add_argument("input", type=Path, help="Report JSON file")
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output PDF path (default: <REPORT_DIR>/report_<number>.pdf)",
    )
    parser.add_argument("--logo", type=Path, default=None, help="Override LOGO_PATH")
    parser.add_argument("--quiet", action="store_true", help="Skip the banner")
    return parser.parse_args(argv)


def default_output_path(report_number: str) -> Path:
    """Output path under the configured report directory."""
    safe_number = report_number.replace("/", "_").replace("\\", "_")
    return config.get_report_dir() / sanitize_filename(f"report_{safe_number}.pdf")


def main(argv=None) -> int:
    args = parse_args(argv)
    if not args.quiet:
        print_banner()

    try:
        payload = json.loads(args.input.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {args.input}: {e}")
        print_error("Input Error", f"Cannot read {args.input}", str(e))
        return 1

    composer = DocumentComposer(logo_path=args.logo)
    result = generate_report(payload, composer=composer)

    if not result.success:
        print_error(result.error_kind, result.error_message)
        return 1

    report_number = str(payload.get("reportNumber") or payload.get("report_number") or "unknown")
    output_path = args.output or default_output_path(report_number)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.pdf)
    logger.info(f"PDF report written: {output_path}")

    print_summary_panel(
        "Report Generated",
        {
            "Report": report_number,
            "Pages": result.page_count,
            "Size": f"{len(result.pdf) / 1024:.1f} KB",
            "Output": output_path,
        },
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

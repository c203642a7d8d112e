"""Command-line access to the exports.

Examples:
  settleme-export export user usr_abc123 times --format pdf
  settleme-export export group grp_x1 receipts --data-file data.json --output out.csv
  settleme-export serve --port 3000
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .errors import MalformedRequestError, NotFoundError, StoreError
from .formatting import check_timezone
from .models import ExportFormat, ReportRequest, ReportType, Scope
from .services import export_report
from .stores import load_snapshot


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="settleme-export",
        description="Export work hours and receipts as CSV or PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Write one export to a file")
    export.add_argument("scope", help=f"one of: {', '.join(s.value for s in Scope)}")
    export.add_argument("scope_id", help="user or group id")
    export.add_argument("report_type", help=f"one of: {', '.join(t.value for t in ReportType)}")
    export.add_argument(
        "--format",
        dest="export_format",
        default=ExportFormat.CSV.value,
        help=f"one of: {', '.join(f.value for f in ExportFormat)} (default: csv)",
    )
    export.add_argument("--data-file", type=Path, default=None, metavar="PATH",
                        help="JSON data file (default: $SETTLEME_DATA_FILE)")
    export.add_argument("--output", type=Path, default=None, metavar="PATH",
                        help="Output path (default: suggested file name in the current directory)")
    export.add_argument("--timezone", default=None, help="Display time zone (default: $SETTLEME_TIMEZONE)")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)
    return parser


def _run_export(args: argparse.Namespace) -> int:
    try:
        request = ReportRequest.parse(args.scope, args.scope_id, args.report_type, args.export_format)
        tz = check_timezone(args.timezone or config.display_timezone())
    except MalformedRequestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        store = load_snapshot(args.data_file or config.data_file())
        result = export_report(
            request,
            store.users,
            store.groups,
            tz=tz,
        )
    except (NotFoundError, StoreError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    output = args.output or Path.cwd() / result.filename
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.content)
    if result.overflow_lines:
        print(f"warning: {result.overflow_lines} lines do not fit on the page", file=sys.stderr)
    print(output)
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("settleme.server:app", host=args.host, port=args.port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return _run_serve(args)
    return _run_export(args)


if __name__ == "__main__":
    sys.exit(main())

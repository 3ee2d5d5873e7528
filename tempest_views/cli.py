"""Command-line entry point: report Tempest view() usage in PHP files.

    tempest-views analyze src/Controllers
    tempest-views analyze HomeController.php --json
    tempest-views init-ignore .
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import MAX_FILE_SIZE, PHP_EXTENSIONS, FileTooLargeError, resolve_log_level
from .errors import ViewAnalysisError
from .formatter import log_analysis_results, report_failure, result_to_dict
from .ignore import ensure_ignore_file, filter_files
from .models import ViewAnalysisResult
from .php_parser import PhpParser, PhpParserError
from .view_intelligence import analyze

logger = logging.getLogger(__name__)


def collect_php_files(paths: list[Path], respect_ignore: bool = True) -> list[Path]:
    """Expand files and directories into a sorted, de-duplicated list of PHP files.

    Files named explicitly are always kept; directory contents go through the
    ignore rules of that directory.
    """
    files: list[Path] = []

    for path in paths:
        if path.is_dir():
            found = sorted(p for p in path.rglob("*") if p.suffix in PHP_EXTENSIONS and p.is_file())
            files.extend(filter_files(found, path, respect_ignore=respect_ignore))
        elif path.is_file():
            files.append(path)
        else:
            raise FileNotFoundError(f"No such file or directory: {path}")

    seen = set()
    unique = []
    for f in files:
        key = f.resolve()
        if key not in seen:
            seen.add(key)
            unique.append(f)
    return unique


def analyze_file(file_path: Path, parser: PhpParser) -> ViewAnalysisResult:
    """
    Parse and analyze one PHP file.

    Raises:
        FileTooLargeError: If the file exceeds MAX_FILE_SIZE
        PhpParserError: If tree-sitter cannot parse it
        ViewAnalysisError: If the tree cannot be analyzed
    """
    size = file_path.stat().st_size
    if size > MAX_FILE_SIZE:
        raise FileTooLargeError(file_path, size, MAX_FILE_SIZE)

    source = file_path.read_bytes()
    tree = parser.parse(source)
    return analyze(tree, source)


def _print_sink(level: int, message: str) -> None:
    stream = sys.stderr if level >= logging.WARNING else sys.stdout
    print(message, file=stream)


def cmd_analyze(args: argparse.Namespace) -> int:
    try:
        files = collect_php_files([Path(p) for p in args.paths], respect_ignore=not args.no_ignore)
        parser = PhpParser()
    except (FileNotFoundError, PhpParserError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    failed = False
    report: dict[str, dict] = {}

    for file_path in files:
        uri = str(file_path)
        try:
            result = analyze_file(file_path, parser)
        except (OSError, FileTooLargeError, PhpParserError, ViewAnalysisError) as e:
            failed = True
            logger.debug(f"Analysis of {uri} failed", exc_info=True)
            if args.json:
                report[uri] = {"error": str(e)}
            else:
                report_failure(uri, e, _print_sink)
            continue

        if args.json:
            report[uri] = result_to_dict(result)
        elif result.call_count > 0 or args.all:
            log_analysis_results(result, uri, _print_sink)

    if args.json:
        print(json.dumps({"files": report}, indent=2))

    return 1 if failed else 0


def cmd_init_ignore(args: argparse.Namespace) -> int:
    created, message = ensure_ignore_file(args.directory)
    print(message)
    return 0 if created else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tempest-views",
        description="Find Tempest view() calls in PHP source.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    # Editors launch language tools with --stdio; accepted and ignored
    parser.add_argument("--stdio", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)"
    )

    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze PHP files or directories")
    analyze_parser.add_argument("paths", nargs="+", help="PHP files or directories")
    analyze_parser.add_argument("--json", action="store_true", help="Emit JSON")
    analyze_parser.add_argument(
        "--no-ignore", action="store_true", help="Do not apply .tempestignore/.gitignore"
    )
    analyze_parser.add_argument(
        "--all", action="store_true", help="Also report files without view() calls"
    )
    analyze_parser.set_defaults(func=cmd_analyze)

    init_parser = subparsers.add_parser("init-ignore", help="Write a default .tempestignore")
    init_parser.add_argument("directory", nargs="?", default=".", type=Path)
    init_parser.set_defaults(func=cmd_init_ignore)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=resolve_log_level(args.verbose),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command is None:
        parser.print_help(sys.stderr)
        return 2

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

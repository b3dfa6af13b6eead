"""
Command line interface.

Usage:
    labplag discover submissions/ -l java -bc template
    labplag report submissions/ --comparisons comparisons.json -r result -n 150
"""
import argparse
import logging
import os
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from .comparison import ComparisonResult, load_comparisons
from .diagnostics import Diagnostics
from .discovery import discover
from .exceptions import DiscoveryError
from .language import LANGUAGES
from .options import AnalysisOptions, load_options, read_exclusion_file
from .report import assemble_report

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "labplag.log"

# Handlers installed by setup_logging, replaced on every call
_log_handlers: list[logging.Handler] = []


def setup_logging(log_dir: str | None = None, log_level: str | None = None) -> Path:
    """
    Configure the root logger with console and file handlers.

    LOG_DIR and LOG_LEVEL environment variables are used when the
    arguments are not given. Calling it again replaces the handlers of
    the previous call instead of adding more.

    Returns:
        Path of the log file
    """
    log_dir = log_dir or os.getenv("LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    while _log_handlers:
        handler = _log_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    _log_handlers.append(console_handler)

    log_file = Path(log_dir) / LOG_FILE_NAME
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    _log_handlers.append(file_handler)

    logger.debug(f"Logging initialized. Log file: {log_file}")
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="labplag",
        description="Discover submissions and assemble similarity reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    labplag discover submissions/ -l python3
    labplag discover submissions/ -bc template/ -s src
    labplag report submissions/ --comparisons comparisons.json -r result
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('root', help='Root directory whose entries are the submissions')
    common.add_argument('-c', '--config', help='YAML config file with analysis options')
    common.add_argument('-l', '--language', choices=sorted(LANGUAGES), help='Language of the submissions')
    common.add_argument('-bc', '--base-code', dest='base_code', help='Basecode path, or name of a root entry (deprecated)')
    common.add_argument('-s', '--subdirectory', dest='subdirectory_name', help='Look for sources in this subdirectory of each submission')
    common.add_argument('-p', '--suffixes', dest='file_suffixes', nargs='+', help='Valid file suffixes')
    common.add_argument('-x', '--exclusion-file', dest='exclusion_file', help='File with names to exclude, one per line')
    common.add_argument('--old', dest='old_submission_directories', nargs='+', help='Secondary submission roots listed in the report')

    subparsers.add_parser('discover', parents=[common], help='List the submissions of a root directory')

    report = subparsers.add_parser('report', parents=[common], help='Assemble a report from comparison results')
    report.add_argument('--comparisons', required=True, help='JSON file with externally computed comparisons')
    report.add_argument('-r', '--result-file', dest='result_path', help='Output path of the report (without .zip)')
    report.add_argument('-n', '--max-comparisons', dest='maximum_comparisons', type=int, help='Maximum number of comparisons in the report, 0 for all')
    report.add_argument('-t', '--min-token-match', dest='minimum_token_match', type=int, help='Similarity sensitivity written to the report')

    return parser


def options_from_args(args: argparse.Namespace) -> AnalysisOptions:
    excluded_files = None
    if args.exclusion_file:
        excluded_files = read_exclusion_file(args.exclusion_file)

    return load_options(
        args.config,
        language=args.language,
        submission_directories=[args.root],
        old_submission_directories=args.old_submission_directories,
        base_code=args.base_code,
        subdirectory_name=args.subdirectory_name,
        file_suffixes=args.file_suffixes,
        excluded_files=excluded_files,
        maximum_comparisons=getattr(args, 'maximum_comparisons', None),
        minimum_token_match=getattr(args, 'minimum_token_match', None),
        result_path=getattr(args, 'result_path', None),
    )


def print_submissions(submission_set) -> None:
    for submission in submission_set:
        print(f"{submission.name}: {len(submission.files)} file(s)")
    if submission_set.base_code is not None:
        print(f"basecode {submission_set.base_code.name}: {len(submission_set.base_code.files)} file(s)")
    print(f"{len(submission_set)} submission(s) found")


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging()

    start = time.monotonic()
    diagnostics = Diagnostics(logger)
    try:
        options = options_from_args(args)
        submission_set = discover(args.root, options, diagnostics=diagnostics)
    except (DiscoveryError, ValueError, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    if args.command == 'discover':
        print_submissions(submission_set)
        return 0

    try:
        comparisons, duration = load_comparisons(args.comparisons, submission_set)
    except (ValueError, OSError) as e:
        logger.error(f"Could not read comparisons: {e}")
        return 1

    duration += int((time.monotonic() - start) * 1000)
    result = ComparisonResult(comparisons, submission_set, options, duration=duration)
    report = assemble_report(result, options.result_path, diagnostics=diagnostics)
    print(report.message)
    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(main())

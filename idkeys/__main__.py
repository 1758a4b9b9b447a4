import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import get_options
from .export import export_resource, load_history, record_problem
from .resources import ResourceSyntaxError, parse_file, parse_file_header
from .resources.parse_text import split_resources


def _report(path: Path, error: ResourceSyntaxError) -> None:
    indented = "\n".join(f"    {line}" for line in str(error).split("\n"))
    print(f"{path}\n{indented}\n", file=sys.stderr)


def validate(paths: Sequence[Path]) -> int:
    exit_status = 0
    for path in paths:
        try:
            parse_file(path.read_text(), path.stem)
        except ResourceSyntaxError as error:
            _report(path, error)
            exit_status = 1
    return exit_status


def headers(paths: Sequence[Path]) -> int:
    exit_status = 0
    for path in paths:
        try:
            metadata = parse_file_header(path.read_text())
        except ResourceSyntaxError as error:
            _report(path, error)
            exit_status = 1
            continue
        for index, resource in enumerate(metadata, start=1):
            levels = ", ".join(rank.display_name for rank in resource.levels)
            print(f"{path.stem}:{index}\t{levels}")
    return exit_status


def _failing_resource(text: str, work_id: str, error: ResourceSyntaxError) -> str:
    """Id of the resource that holds the first error."""
    line = error.errors[0].line
    index = sum(1 for block in split_resources(text) if block.line <= line)
    return f"{work_id}:{index}"


def process(work_ids: Sequence[str], *, old_path: Path | None = None) -> int:
    options = get_options()
    exit_status = 0
    for work_id in work_ids:
        path = options.txt_path / f"{work_id}.txt"
        old = None
        if old_path is not None:
            old = load_history(old_path.read_text(), options.dwc_path, work_id)
        text = path.read_text()
        try:
            resources = parse_file(text, work_id, old)
        except ResourceSyntaxError as error:
            _report(path, error)
            record_problem(
                options.problems_filename,
                work_id,
                _failing_resource(text, work_id, error),
                error.messages[0],
            )
            exit_status = 1
            continue
        options.dwc_path.mkdir(parents=True, exist_ok=True)
        for resource in resources:
            export_resource(resource, options.dwc_path)
    return exit_status


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser("idkeys")
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="check text files")
    validate_parser.add_argument("files", nargs="+", type=Path)

    headers_parser = subparsers.add_parser("headers", help="list resources")
    headers_parser.add_argument("files", nargs="+", type=Path)

    process_parser = subparsers.add_parser(
        "process", help="convert works to Darwin Core"
    )
    process_parser.add_argument("work_ids", nargs="+")
    process_parser.add_argument(
        "--old",
        type=Path,
        default=None,
        help="previous revision of the text file, to keep identifiers stable",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "validate":
        return validate(args.files)
    elif args.command == "headers":
        return headers(args.files)
    else:
        return process(args.work_ids, old_path=args.old)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
globcat: Concatenate files selected by glob patterns into one annotated document

Pattern styles:
  globcat 'src/**/*.py'            recursive wildcard
  globcat pkg/... 'cmd/.../*.go'   directory prefix with optional filter
  globcat '*.md' docs              single-level glob; directories are walked

Common usage:
  globcat 'pkg/.../*.go' -x '**/*_test.go' -o context.txt
  globcat --git-diff 'pkg/...'
  globcat --list-files .
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from globcat.config import find_config_file, load_config, merge_cli_with_config, parse_size
from globcat.file_loader import (
    DEFAULT_MAX_FILE_SIZE,
    FileLoader,
    FileLoaderConfig,
    FileLoadError,
    load_ignore_spec,
)
from globcat.git_diff import GitDiffError, GitDiffProvider
from globcat.logging import configure_logging, get_logger

log = get_logger("cli")


@dataclass
class Options:
    """Command-line options for the globcat tool."""

    patterns: list[str]
    exclude: list[str]
    default_excludes: bool
    respect_gitignore: bool
    max_file_size: int
    git_diff: bool
    git_branch: str | None
    list_files: bool
    output: str
    verbose: bool
    version: bool


def _size(value: str) -> int:
    try:
        return parse_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` tracks which flags
    the user explicitly passed (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="globcat",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "patterns",
        nargs="*",
        type=str,
        default=[],
        metavar="PATTERN",
        help="Files, directories or patterns to include ('**' globs, 'dir/...' or plain globs)",
    )
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Pattern to exclude from the matched files (e.g. 'vendor/**'). Can be repeated",
    )
    parser.add_argument(
        "--no-default-excludes",
        action="store_true",
        dest="no_default_excludes",
        help="Do not exclude version control, dependency and build directories by default",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_true",
        dest="no_respect_gitignore",
        help="Disable .gitignore integration",
    )
    parser.add_argument(
        "--max-file-size",
        type=_size,
        default=DEFAULT_MAX_FILE_SIZE,
        dest="max_file_size",
        metavar="SIZE",
        help="Skip files larger than this size; accepts k/m/g suffixes, 0 = no limit "
        "(default: %(default)s)",
    )
    parser.add_argument(
        "--git-diff",
        action="store_true",
        dest="git_diff",
        help="Include uncommitted changes from `git diff`",
    )
    parser.add_argument(
        "--git-branch",
        type=str,
        default=None,
        dest="git_branch",
        metavar="BRANCH",
        help="Include the diff between BRANCH and the default branch (main or master)",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved file paths instead of their contents",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument(
        "--no-default-excludes", dest="default_excludes", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--no-respect-gitignore", dest="respect_gitignore", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument("--max-file-size", dest="max_file_size", default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])
    explicit_flags = {
        name
        for name in ("default_excludes", "respect_gitignore", "max_file_size")
        if getattr(sentinel_opts, name) is not _SENTINEL
    }

    return (
        Options(
            patterns=opts.patterns,
            exclude=opts.exclude,
            default_excludes=not opts.no_default_excludes,
            respect_gitignore=not opts.no_respect_gitignore,
            max_file_size=opts.max_file_size,
            git_diff=opts.git_diff,
            git_branch=opts.git_branch,
            list_files=opts.list_files,
            output=opts.output,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _write_output(text: str, output: str) -> None:
    if output == "-":
        sys.stdout.write(text)
        return
    with atomic_output_file(Path(output), make_parents=True) as tmp_path:
        Path(tmp_path).write_text(text, encoding="utf-8", errors="surrogateescape")


def _add_git_diffs(options: Options, provider: GitDiffProvider, patterns: list[str]) -> None:
    """Append diff files requested on the command line to `patterns`."""
    diffs = []
    if options.git_diff:
        diffs.append(provider.uncommitted())
    if options.git_branch:
        diffs.append(provider.branch(options.git_branch))
    for diff in diffs:
        if diff is not None:
            log.info("including %s", diff.description)
            patterns.append(str(diff.path))


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the globcat CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("globcat")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    configure_logging(verbose=options.verbose)

    if not options.patterns and not options.git_diff and not options.git_branch:
        print(
            "Error: No patterns specified. Provide files, directories or patterns"
            " (e.g. 'pkg/...', 'src/**/*.py'). Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    root = Path.cwd()
    provider = GitDiffProvider(cwd=root)
    try:
        config_path = find_config_file(root)
        if config_path:
            log.debug("using config file %s", config_path)
            merge_cli_with_config(options, load_config(config_path), explicit_flags)

        patterns = list(options.patterns)
        _add_git_diffs(options, provider, patterns)
        if not patterns:
            # Only git diffs were requested and both were empty.
            return 0

        loader = FileLoader(
            FileLoaderConfig(
                max_file_size=options.max_file_size,
                default_excludes=options.default_excludes,
                ignore_spec=load_ignore_spec(root, respect_gitignore=options.respect_gitignore),
            ),
            root=root,
        )
        if options.list_files:
            for path in loader.resolve(patterns, options.exclude):
                print(path)
            return 0

        _write_output(loader.load(patterns, options.exclude), options.output)
    except (FileLoadError, GitDiffError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        provider.cleanup()

    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
respack: Bundle resource files into a generated Python module

Common usage:
  respack assets/ -o myapp/_resources.py
  respack 'templates/*.html' 'static/' -o myapp/_resources.py --depfile build/resources.d
  respack --list-files assets/

Relative patterns are resolved against --unit-dir (default: the current directory,
or the directory of the config file the patterns came from). Settings can also be
put in `respack.toml`, `.respack.toml`, or `[tool.respack]` in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from respack.config import find_config_file, load_config, merge_cli_with_config
from respack.errors import ConfigError, RespackError
from respack.file_resolver.excludes import read_exclude_file
from respack.pipeline import BundleConfig, bundle

logger = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the respack tool."""

    patterns: list[str]
    unit_dir: str | None
    output: str | None
    depfile: str | None
    exclude: list[str]
    exclude_from: str | None
    sort: bool
    list_files: bool
    json: bool
    verbose: int
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which flags the user explicitly passed (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="respack",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "patterns",
        nargs="*",
        type=str,
        default=[],
        help="Directories to bundle recursively, or glob patterns (quote them)",
    )
    parser.add_argument(
        "--unit-dir",
        type=str,
        default=None,
        dest="unit_dir",
        metavar="DIR",
        help="Directory relative patterns are resolved against (default: current directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Write the generated Python module here (default: stdout)",
    )
    parser.add_argument(
        "--depfile",
        type=str,
        default=None,
        metavar="FILE",
        help="Also write a Make-style dependency file listing every bundled file "
        "(requires --output)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip files matching this gitignore-style pattern (e.g., '*.tmp', 'drafts/'). "
        "Can be repeated",
    )
    parser.add_argument(
        "--exclude-from",
        type=str,
        default=None,
        dest="exclude_from",
        metavar="FILE",
        help="Read exclusion patterns from a file, one per line",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        help="Sort each pattern's files by name instead of keeping discovery order",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the names of the bundled resources instead of generating a module",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="With --list-files, print a JSON manifest with sizes and dependencies",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (repeat for debug output)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied.
    # append actions use None as sentinel (argparse creates a list when the flag is used).
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("--unit-dir", dest="unit_dir", default=_SENTINEL)
    sentinel_parser.add_argument("-o", "--output", default=_SENTINEL)
    sentinel_parser.add_argument("--depfile", default=_SENTINEL)
    sentinel_parser.add_argument("--exclude", action="append", default=None)
    sentinel_parser.add_argument("--exclude-from", dest="exclude_from", default=_SENTINEL)
    sentinel_parser.add_argument("--sort", action="store_true", default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for name in ("unit_dir", "output", "depfile", "exclude_from", "sort"):
        if getattr(sentinel_opts, name) is not _SENTINEL:
            explicit_flags.add(name)
    if sentinel_opts.exclude is not None:
        explicit_flags.add("exclude")
    if opts.patterns:
        explicit_flags.add("patterns")

    return (
        Options(
            patterns=opts.patterns,
            unit_dir=opts.unit_dir,
            output=opts.output,
            depfile=opts.depfile,
            exclude=opts.exclude,
            exclude_from=opts.exclude_from,
            sort=opts.sort,
            list_files=opts.list_files,
            json=opts.json,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def _effective_excludes(options: Options) -> list[str]:
    excludes = list(options.exclude)
    if options.exclude_from:
        path = Path(options.exclude_from)
        try:
            excludes.extend(read_exclude_file(path))
        except OSError as e:
            raise ConfigError(f"could not read exclude file `{path}`: {e}", path=path) from e
    return excludes


def _run(options: Options) -> int:
    if options.depfile and not options.output:
        raise ConfigError("--depfile requires --output")

    config = BundleConfig(
        patterns=options.patterns,
        unit_dir=Path(options.unit_dir) if options.unit_dir else None,
        exclude=_effective_excludes(options),
        sort=options.sort,
    )
    result = bundle(config)

    from respack.emit import package_manifest, render_module, write_depfile, write_module

    if options.list_files:
        if options.json:
            print(json.dumps(package_manifest(result), indent=2))
        else:
            for name in result.package.names():
                print(name)
        return 0

    if options.output:
        output = Path(options.output)
        write_module(result.package, output, patterns=options.patterns)
        logger.info("Wrote %s", output)
        if options.depfile:
            write_depfile(output, result.dependencies, Path(options.depfile))
            logger.info("Wrote %s", options.depfile)
    else:
        sys.stdout.write(render_module(result.package, patterns=options.patterns))
    return 0


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the respack CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for configuration errors, 2 for build errors)
    """
    options, explicit_flags = _parse_args(args)
    _setup_logging(options.verbose)

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("respack")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    try:
        # Load and merge config file settings
        has_patterns = "patterns" in explicit_flags
        config_path = find_config_file(Path.cwd())
        if config_path:
            logger.debug("Using config file %s", config_path)
            file_config = load_config(config_path)
            merge_cli_with_config(options, file_config, explicit_flags)
            # An explicit empty list in the config is legal and bundles nothing.
            has_patterns = has_patterns or file_config.patterns is not None

        if not has_patterns:
            print(
                "Error: No patterns specified. Provide directories or glob patterns, "
                "or set `patterns` in respack.toml. Use --help for more options.",
                file=sys.stderr,
            )
            return 1

        return _run(options)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RespackError as e:
        # Enumeration, read, and resolution failures: the build step must be re-run.
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

"""Command line entrypoint.

Usage:
  libdef-resolver validate <definitions> [--format json|markdown]
  libdef-resolver find <package> <range> --flow-version 0.38.0 [--definitions DIR]
  libdef-resolver install [pkg@range ...] [--flow-version V] [--overwrite] [--definitions DIR]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from . import git
from .config import ConfigError, Settings, load_settings
from .discovery import get_libdefs
from .errors import ErrorAccumulator, LibDefError
from .install import (
    InstallError,
    determine_tool_version,
    find_project_root,
    install_libdefs,
    parse_explicit_libdefs,
)
from .models.libdef import LibDef
from .parsers import package_json
from .report import aggregate
from .resolver import find_libdef, needs_update
from .summary import render_summary

LOG_FORMAT = "[%(levelname)s] %(message)s"

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="libdef-resolver", description=__doc__.splitlines()[0])
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings JSON file")
    parser.add_argument("--verbose", action="store_true", help="Print debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Lint a definitions tree and report every problem")
    validate.add_argument("definitions", type=Path)
    validate.add_argument("--format", choices=("json", "markdown"), default="json")

    find = sub.add_parser("find", help="Find the libdef for one package version range")
    find.add_argument("package")
    find.add_argument("range")
    find.add_argument("--flow-version", "-f", required=True)
    find.add_argument("--definitions", type=Path, default=None)

    install = sub.add_parser("install", help="Install libdefs into ./flow-typed/npm")
    install.add_argument("libdefs", nargs="*", help="Explicit libdefs such as foo@1.2.3")
    install.add_argument("--flow-version", "-f", default=None)
    install.add_argument("--overwrite", "-o", action="store_true")
    install.add_argument("--definitions", type=Path, default=None)
    install.add_argument("--cwd", type=Path, default=Path("."))

    return parser.parse_args(argv)


def _definitions_dir(explicit: Path | None, settings: Settings) -> Path:
    if explicit is not None:
        return explicit
    return git.ensure_cache_repo(settings.cache_repo_url, settings.cache_dir) / "definitions"


def _load_libdefs(definitions: Path, settings: Settings) -> list[LibDef]:
    """Load libdefs for resolution; malformed entries are logged and skipped."""
    errors = ErrorAccumulator()
    libdefs = get_libdefs(definitions, errors, settings)
    for context, messages in errors.items():
        for message in messages:
            logger.warning("Skipping %s: %s", context, message)
    return libdefs


def _run_validate(args: argparse.Namespace, settings: Settings) -> int:
    errors = ErrorAccumulator()
    libdefs = get_libdefs(args.definitions, errors, settings)
    report = aggregate(libdefs, errors)
    if args.format == "markdown":
        sys.stdout.write(render_summary(report))
    else:
        print(json.dumps(report, indent=2))
    return 1 if report["hasErrors"] else 0


def _run_find(args: argparse.Namespace, settings: Settings) -> int:
    tool_version = determine_tool_version(args.flow_version)
    libdefs = _load_libdefs(_definitions_dir(args.definitions, settings), settings)
    libdef = find_libdef(libdefs, args.package, args.range, tool_version)
    if libdef is None:
        print(
            f"No {settings.tool_name}@{tool_version.to_semver_string()}-compatible libdef "
            f"found for {args.package}@{args.range}",
            file=sys.stderr,
        )
        return 1
    result = libdef.to_dict()
    result["needsUpdate"] = needs_update(libdef, args.range)
    print(json.dumps(result, indent=2))
    return 0


def _repo_version(args: argparse.Namespace, settings: Settings) -> Callable[[LibDef], str]:
    if args.definitions is None:
        return lambda libdef: git.libdef_version_hash(
            settings.cache_dir, libdef, settings.tool_name
        )
    tool = settings.tool_name
    return lambda libdef: (
        f"local/{libdef.full_name}_{libdef.version}/{tool}_{libdef.tool_version.to_dir_suffix()}"
    )


def _run_install(args: argparse.Namespace, settings: Settings) -> int:
    project_root = find_project_root(args.cwd)
    if project_root is None:
        print(
            "ERROR: Unable to find a flow project in the current dir or any of its "
            "parent dirs! Please run this command from within a Flow project.",
            file=sys.stderr,
        )
        return 1

    pkg_json_path = project_root / "package.json"
    package_data = package_json.load(pkg_json_path) if pkg_json_path.exists() else {}

    if args.libdefs:
        dependencies = parse_explicit_libdefs(args.libdefs)
    else:
        dependencies = package_json.dependencies(package_data)
        if not dependencies:
            print("ERROR: No dependencies were found in this project's package.json!", file=sys.stderr)
            return 1
    logger.info("Searching for %d libdef(s)...", len(dependencies))

    tool_version = determine_tool_version(args.flow_version, package_data)
    libdefs = _load_libdefs(_definitions_dir(args.definitions, settings), settings)
    summary = install_libdefs(
        libdefs,
        dependencies,
        tool_version,
        project_root,
        _repo_version(args, settings),
        overwrite=args.overwrite,
        builtin_packages=settings.builtin_packages,
    )

    result = {
        "installed": [str(p) for p in summary.installed],
        "failed": [{"libdef": libdef.full_name, "error": err} for libdef, err in summary.failed],
        "needsUpdate": [
            {
                "libdef": f"{item.libdef.full_name}_{item.libdef.version}",
                "satisfies": f"{item.pkg_name}@{item.requested_range}",
            }
            for item in summary.needs_update
        ],
        "missing": [f"{name}@{rng}" for name, rng in summary.missing],
    }
    print(json.dumps(result, indent=2))
    return 0 if summary.ok else 1


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if args.verbose else logging.INFO)

    handlers = {
        "validate": _run_validate,
        "find": _run_find,
        "install": _run_install,
    }
    try:
        settings = load_settings(args.config)
        return handlers[args.command](args, settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    except (LibDefError, InstallError, git.GitError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for winpkgrole.

Commands:

    scaffold: Write the generic role, vars file and playbooks, then commit and push
    validate: Validate a package descriptor (no writes, no git)
    check: Report files missing from an existing scaffold

Example:
    Reproduce the VLC migration into ~/ansible:
        ```bash
        $ wpkg scaffold
        ```

    Scaffold another package without pushing:
        ```bash
        $ wpkg scaffold packages/7zip.yaml --no-push
        ```

    Validate a descriptor:
        ```bash
        $ wpkg validate packages/7zip.yaml
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, filesystem, or git failure; invalid descriptor)

Note:
    Verbose mode shows full tracebacks on errors. Debug mode implies verbose
    mode and also shows merged configuration and git output.
"""

from __future__ import annotations

import argparse
from importlib.metadata import version
from pathlib import Path
import sys

from winpkgrole.core import check_package, load_package, next_steps, scaffold_package
from winpkgrole.exceptions import WinPkgRoleError
from winpkgrole.logging import get_logger, set_global_logger
from winpkgrole.validation import validate_descriptor


def _report_error(err: Exception, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if getattr(args, "verbose", False) or getattr(args, "debug", False):
        import traceback

        traceback.print_exc()
    return 1


def _descriptor_path(args: argparse.Namespace) -> Path | None:
    return Path(args.descriptor).resolve() if args.descriptor else None


def cmd_scaffold(args: argparse.Namespace) -> int:
    """Handler for 'wpkg scaffold' command.

    Loads the descriptor (or the built-in VLC one), writes the role tree,
    vars/task files and playbooks, copies the installer ZIP if present, and
    runs git add/commit/push unless disabled.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        descriptor, settings = load_package(
            _descriptor_path(args),
            ansible_root=Path(args.root) if args.root else None,
            role_name=args.role,
            hosts=args.hosts,
            commit=False if args.no_commit else None,
            push=False if args.no_push else None,
        )
    except (FileNotFoundError, WinPkgRoleError) as err:
        return _report_error(err, args)

    print(f"=== Creating {settings.role_name} role structure ===")
    print(f"Package:      {descriptor.name} {descriptor.version}")
    print(f"Ansible root: {settings.ansible_root}")
    print()

    try:
        result = scaffold_package(descriptor, settings)
    except WinPkgRoleError as err:
        return _report_error(err, args)

    print()
    print("=" * 70)
    print("SCAFFOLD RESULTS")
    print("=" * 70)
    print(f"Package:         {result.package_name} ({result.package_id})")
    print(f"Role Directory:  {result.role_dir}")
    print(f"Files Written:   {len(result.written_files)}")
    for path in result.playbooks:
        print(f"Playbook:        {path}")
    if result.asset_copied:
        print(f"Package Asset:   {result.asset_path}")
    else:
        print("Package Asset:   (not copied)")
    if result.commit is None:
        print("git:             skipped")
    else:
        print(f"git:             committed{', pushed' if result.commit.pushed else ''}")
    print(f"Status:          {result.status}")
    print("=" * 70)
    print()
    print("=== Refactoring complete ===")
    print()
    print("Next steps:")
    for line in next_steps(descriptor, settings):
        print(line)

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'wpkg validate' command.

    Args:
        args: Parsed command-line arguments containing the descriptor path.

    Returns:
        Exit code (0 for a valid descriptor, 1 for an invalid one).
    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    descriptor_path = Path(args.descriptor).resolve()

    print(f"Validating descriptor: {descriptor_path}")
    print()

    result = validate_descriptor(descriptor_path)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Descriptor:  {result.descriptor_path}")
    print(f"Status:      {result.status.upper()}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Descriptor is valid!")
        return 0

    print()
    print(f"[FAILED] Descriptor validation failed with {len(result.errors)} error(s).")
    return 1


def cmd_check(args: argparse.Namespace) -> int:
    """Handler for 'wpkg check' command.

    Returns:
        Exit code (0 if every generated file exists, 1 otherwise).
    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    try:
        descriptor, settings = load_package(
            _descriptor_path(args),
            ansible_root=Path(args.root) if args.root else None,
            role_name=args.role,
        )
    except (FileNotFoundError, WinPkgRoleError) as err:
        return _report_error(err, args)

    result = check_package(descriptor, settings)

    print(f"Role Directory: {result.role_dir}")
    print(f"Status:         {result.status.upper()}")
    for path in result.missing:
        print(f"  [X] missing: {path}")

    return 0 if result.status == "complete" else 1


def _add_location_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "descriptor",
        nargs="?",
        default=None,
        help="Package descriptor YAML (default: built-in VLC descriptor)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Ansible repository root (default: $WINPKGROLE_ANSIBLE_ROOT or ~/ansible)",
    )
    parser.add_argument(
        "--role",
        default=None,
        help="Role name (default: win_package_manager)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress details",
    )


def main() -> None:
    """Main entry point for the wpkg CLI.

    This function is registered as the 'wpkg' console script in pyproject.toml.
    """
    parser = argparse.ArgumentParser(
        prog="wpkg",
        description="Scaffold the generic Ansible role for Windows software packages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"wpkg {version('winpkgrole')}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'scaffold' command
    parser_scaffold = subparsers.add_parser(
        "scaffold",
        help="Write role, vars and playbooks, then commit and push",
        description="Create the generic role for a package descriptor and publish it with git.",
    )
    _add_location_arguments(parser_scaffold)
    parser_scaffold.add_argument(
        "--hosts",
        default=None,
        help="Inventory host group for the playbooks (default: windows)",
    )
    parser_scaffold.add_argument(
        "--no-commit",
        action="store_true",
        help="Write files only; skip git add/commit/push",
    )
    parser_scaffold.add_argument(
        "--no-push",
        action="store_true",
        help="Commit but do not push",
    )
    parser_scaffold.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_scaffold.set_defaults(func=cmd_scaffold)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate a package descriptor (no writes, no git)",
        description="Check a descriptor for syntax errors and missing fields.",
    )
    parser_validate.add_argument(
        "descriptor",
        help="Path to the package descriptor YAML",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'check' command
    parser_check = subparsers.add_parser(
        "check",
        help="Report files missing from an existing scaffold",
        description="Verify the role tree, vars file, task files and playbooks exist.",
    )
    _add_location_arguments(parser_check)
    parser_check.set_defaults(func=cmd_check)

    args = parser.parse_args()

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

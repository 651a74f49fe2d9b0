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

"""Core orchestration for winpkgrole.

A scaffolding run is a flat, single pass of side effects executed in order:

1. Create roles/<role>/{files,tasks,vars}
2. Write vars/<package_id>.yml and the six task files
3. Copy the installer ZIP into files/ (warn if it is missing)
4. Write the three playbooks
5. git add, commit and push

Any exception aborts the run at the step that raised it. Files already
written stay on disk; there is no rollback.

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from winpkgrole.core import load_package, scaffold_package

        descriptor, settings = load_package(Path("packages/7zip.yaml"))
        result = scaffold_package(descriptor, settings)

        for path in result.written_files:
            print(path)
        ```
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from winpkgrole.config import ScaffoldSettings, load_effective_config, load_settings
from winpkgrole.config.environment import ROLE_NAME_PATTERN
from winpkgrole.descriptor import DEFAULT_DESCRIPTOR, PackageDescriptor, descriptor_from_config
from winpkgrole.exceptions import ConfigError
from winpkgrole.results import CheckResult, ScaffoldResult
from winpkgrole.role import (
    copy_asset,
    create_role_tree,
    verify_role_structure,
    write_playbooks,
    write_task_files,
    write_vars_file,
)
from winpkgrole.vcs import build_commit_message, commit_and_push

TOTAL_STEPS = 5


def load_package(
    descriptor_path: Path | None = None, **overrides: Any
) -> tuple[PackageDescriptor, ScaffoldSettings]:
    """Load a descriptor and the run settings that go with it.

    Args:
        descriptor_path: Package descriptor YAML. If None, the built-in VLC
            descriptor is used and settings come from the environment only.
        **overrides: Keyword overrides passed to load_settings (ansible_root,
            role_name, hosts, commit, push).

    Returns:
        A tuple (descriptor, settings).

    Raises:
        FileNotFoundError: If descriptor_path does not exist.
        ConfigError: If the descriptor is invalid.
    """
    if descriptor_path is None:
        return DEFAULT_DESCRIPTOR, load_settings(None, **overrides)

    config = load_effective_config(descriptor_path)
    return descriptor_from_config(config), load_settings(config, **overrides)


def _staged_paths(
    settings: ScaffoldSettings, playbooks: list[Path]
) -> list[str]:
    paths = [f"roles/{settings.role_name}/"]
    paths += [p.relative_to(settings.ansible_root).as_posix() for p in playbooks]
    return paths


def scaffold_package(
    descriptor: PackageDescriptor, settings: ScaffoldSettings
) -> ScaffoldResult:
    """Scaffold descriptor into the generic role, then commit and push.

    Args:
        descriptor: Package to scaffold.
        settings: Where to write and what to do with git.

    Returns:
        ScaffoldResult listing everything written.

    Raises:
        ConfigError: If the Ansible root does not exist or the role name is
            not a plain directory name.
        ScaffoldError: If a directory or file cannot be written.
        VcsError: If a git command fails.
    """
    from winpkgrole.logging import get_global_logger

    logger = get_global_logger()
    root = settings.ansible_root.expanduser()

    if not root.is_dir():
        raise ConfigError(f"Ansible root not found: {root}")
    if not ROLE_NAME_PATTERN.match(settings.role_name):
        raise ConfigError(f"Invalid role name {settings.role_name!r}")

    root = root.resolve()
    settings = replace(settings, ansible_root=root)

    logger.verbose("CORE", f"Ansible root: {root}")
    logger.verbose("CORE", f"Package: {descriptor.name} {descriptor.version}")

    logger.step(1, TOTAL_STEPS, f"Creating {settings.role_name} role structure...")
    role_dir = create_role_tree(root, settings.role_name)

    logger.step(2, TOTAL_STEPS, "Writing vars and task files...")
    written = [write_vars_file(role_dir, descriptor)]
    written += write_task_files(role_dir, settings.role_name)

    logger.step(3, TOTAL_STEPS, f"Copying {descriptor.name} package to role...")
    asset_path = copy_asset(root, role_dir, descriptor)

    logger.step(4, TOTAL_STEPS, "Writing playbooks...")
    playbooks = write_playbooks(root, descriptor, settings.role_name, settings.hosts)
    written += playbooks

    commit = None
    if settings.commit:
        logger.step(5, TOTAL_STEPS, "Running git operations...")
        commit = commit_and_push(
            root,
            _staged_paths(settings, playbooks),
            build_commit_message(descriptor, settings.role_name),
            push=settings.push,
        )
    else:
        logger.step(5, TOTAL_STEPS, "Skipping git operations")

    return ScaffoldResult(
        package_id=descriptor.package_id,
        package_name=descriptor.name,
        role_dir=role_dir,
        written_files=written,
        playbooks=playbooks,
        asset_path=asset_path,
        asset_copied=asset_path is not None,
        commit=commit,
        status="success",
    )


def check_package(
    descriptor: PackageDescriptor, settings: ScaffoldSettings
) -> CheckResult:
    """Report which generated files are missing for descriptor."""
    return verify_role_structure(
        settings.ansible_root.expanduser(), settings.role_name, descriptor
    )


def next_steps(descriptor: PackageDescriptor, settings: ScaffoldSettings) -> list[str]:
    """Follow-up instructions printed after a successful run."""
    role = settings.role_name
    steps = ["1. Test the new playbooks in AWX"]
    if descriptor.legacy_role:
        steps += [
            f"2. Once validated, remove old {descriptor.legacy_role} role:",
            f"   git rm -r roles/{descriptor.legacy_role}",
            f"   git commit -m 'Remove old {descriptor.legacy_role} role'",
            "   git push",
        ]
    steps += [
        "",
        "To add a new package (e.g., tartempion):",
        "1. Create packages/tartempion.yaml (see 'wpkg validate')",
        f"2. Copy tartempion ZIP to roles/{role}/files/ or set package.asset",
        "3. Run 'wpkg scaffold packages/tartempion.yaml'",
    ]
    return steps

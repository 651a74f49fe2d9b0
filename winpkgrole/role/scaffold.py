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

"""Filesystem side of role scaffolding.

Creates the role tree, writes the rendered vars/task/playbook files and
copies the installer ZIP into the role.

Layout written under the Ansible root:

    roles/<role>/files/<package zip>        (copied, if found)
    roles/<role>/tasks/{main,detect,install,upgrade,uninstall,cleanup}.yml
    roles/<role>/vars/<package_id>.yml
    playbooks/win_<package_id>_{auto,force_install,force_uninstall}.yml

Existing files are overwritten. Every OSError is re-raised as ScaffoldError;
the only soft failure is a missing installer ZIP, which is logged as a warning.
"""

from __future__ import annotations

from pathlib import Path
import shutil

from winpkgrole.descriptor import MODES, PackageDescriptor
from winpkgrole.exceptions import ScaffoldError
from winpkgrole.results import CheckResult
from winpkgrole.role.template import (
    TASK_FILES,
    render_playbook,
    render_task_files,
    render_vars_file,
)

ROLE_SUBDIRS = ("files", "tasks", "vars")


def _write_text(path: Path, text: str) -> Path:
    from winpkgrole.logging import get_global_logger

    logger = get_global_logger()
    try:
        path.write_text(text, encoding="utf-8", newline="\n")
    except OSError as err:
        raise ScaffoldError(f"Failed to write {path}: {err}") from err
    logger.verbose("ROLE", f"Wrote {path}")
    return path


def create_role_tree(ansible_root: Path, role_name: str) -> Path:
    """Create roles/<role>/{files,tasks,vars} under the Ansible root.

    Args:
        ansible_root: Ansible repository root.
        role_name: Role directory name.

    Returns:
        Path to roles/<role>/.

    Raises:
        ScaffoldError: If a directory cannot be created.
    """
    from winpkgrole.logging import get_global_logger

    logger = get_global_logger()
    role_dir = ansible_root / "roles" / role_name

    for sub in ROLE_SUBDIRS:
        try:
            (role_dir / sub).mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise ScaffoldError(
                f"Failed to create directory {role_dir / sub}: {err}"
            ) from err

    logger.verbose("ROLE", f"Role structure ready: {role_dir}")
    return role_dir


def write_vars_file(role_dir: Path, descriptor: PackageDescriptor) -> Path:
    """Write vars/<package_id>.yml and return its path."""
    return _write_text(
        role_dir / "vars" / descriptor.vars_filename, render_vars_file(descriptor)
    )


def write_task_files(role_dir: Path, role_name: str) -> list[Path]:
    """Write the six task files and return their paths in write order."""
    tasks_dir = role_dir / "tasks"
    return [
        _write_text(tasks_dir / name, text)
        for name, text in render_task_files(role_name).items()
    ]


def write_playbooks(
    ansible_root: Path,
    descriptor: PackageDescriptor,
    role_name: str,
    hosts: str = "windows",
) -> list[Path]:
    """Write one playbook per mode into <root>/playbooks/.

    Returns:
        Playbook paths in MODES order.

    Raises:
        ScaffoldError: If playbooks/ cannot be created or a file cannot be written.
    """
    playbooks_dir = ansible_root / "playbooks"
    try:
        playbooks_dir.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise ScaffoldError(
            f"Failed to create directory {playbooks_dir}: {err}"
        ) from err

    return [
        _write_text(
            playbooks_dir / descriptor.playbook_filename(mode),
            render_playbook(descriptor, mode, role_name, hosts),
        )
        for mode in MODES
    ]


def copy_asset(
    ansible_root: Path, role_dir: Path, descriptor: PackageDescriptor
) -> Path | None:
    """Copy the installer ZIP into roles/<role>/files/.

    A missing source is not an error: a warning tells the user to copy the
    ZIP by hand and None is returned.

    Returns:
        Destination path, or None when the source was not found.

    Raises:
        ScaffoldError: If the source exists but cannot be copied.
    """
    from winpkgrole.logging import get_global_logger

    logger = get_global_logger()
    source = descriptor.asset_source(ansible_root)

    if source is None or not source.is_file():
        logger.warning(
            f"{descriptor.name} package not found"
            + (f" at {source}" if source is not None else "")
            + ", you'll need to copy it manually"
        )
        return None

    dest = role_dir / "files" / descriptor.zip
    try:
        shutil.copy2(source, dest)
    except OSError as err:
        raise ScaffoldError(f"Failed to copy {source} to {dest}: {err}") from err

    logger.verbose("ROLE", f"{descriptor.name} package copied successfully: {dest}")
    return dest


def expected_files(
    ansible_root: Path, role_name: str, descriptor: PackageDescriptor
) -> list[Path]:
    """Every file a completed scaffold of descriptor leaves behind."""
    role_dir = ansible_root / "roles" / role_name
    paths = [role_dir / "vars" / descriptor.vars_filename]
    paths += [role_dir / "tasks" / name for name in TASK_FILES]
    paths += [
        ansible_root / "playbooks" / descriptor.playbook_filename(mode)
        for mode in MODES
    ]
    return paths


def verify_role_structure(
    ansible_root: Path, role_name: str, descriptor: PackageDescriptor
) -> CheckResult:
    """Check that the role tree and all generated files exist.

    The installer ZIP is not required: its absence is a warning at scaffold
    time, not an incomplete role.
    """
    role_dir = ansible_root / "roles" / role_name
    missing = [role_dir / sub for sub in ROLE_SUBDIRS if not (role_dir / sub).is_dir()]
    missing += [
        p
        for p in expected_files(ansible_root, role_name, descriptor)
        if not p.is_file()
    ]

    return CheckResult(
        role_dir=role_dir,
        missing=missing,
        status="incomplete" if missing else "complete",
    )

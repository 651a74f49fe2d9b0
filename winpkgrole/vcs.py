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

"""git operations for winpkgrole.

Stages the generated role and playbooks, commits them with a fixed message
and pushes to the configured upstream. git is invoked as a subprocess in the
Ansible root; there is no retry and no rollback. A failing command raises
VcsError and stops the run.

Example:
    from pathlib import Path
    from winpkgrole.descriptor import DEFAULT_DESCRIPTOR
    from winpkgrole.vcs import build_commit_message, commit_and_push

    message = build_commit_message(DEFAULT_DESCRIPTOR, "win_package_manager")
    result = commit_and_push(
        Path("~/ansible").expanduser(),
        ["roles/win_package_manager/", "playbooks/win_vlc_auto.yml"],
        message,
    )
"""

from __future__ import annotations

from pathlib import Path
import subprocess

from winpkgrole.descriptor import PackageDescriptor
from winpkgrole.exceptions import VcsError
from winpkgrole.results import CommitResult

GIT_TIMEOUT = 300


def _run_git(repo_dir: Path, *args: str) -> str:
    """Run one git command in repo_dir and return its stdout.

    Raises:
        VcsError: If git is missing, exits nonzero, or times out.
    """
    from winpkgrole.logging import get_global_logger

    logger = get_global_logger()
    cmd = ["git", *args]
    logger.verbose("GIT", f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            cwd=repo_dir,
            capture_output=True,
            text=True,
            check=True,
            timeout=GIT_TIMEOUT,
        )
    except FileNotFoundError as err:
        raise VcsError("git executable not found; install git and add it to PATH") from err
    except subprocess.CalledProcessError as err:
        error_msg = f"git {args[0]} failed (exit code {err.returncode})"
        if err.stderr:
            error_msg += f"\n{err.stderr.strip()}"
        raise VcsError(error_msg) from err
    except subprocess.TimeoutExpired as err:
        raise VcsError(f"git {args[0]} timed out after {err.timeout}s") from err

    for line in (result.stdout or "").splitlines():
        logger.debug("GIT", f"  {line}")

    return result.stdout or ""


def git_add(repo_dir: Path, paths: list[str]) -> None:
    """Stage each path with its own ``git add``."""
    for path in paths:
        _run_git(repo_dir, "add", path)


def git_commit(repo_dir: Path, message: str) -> None:
    _run_git(repo_dir, "commit", "-m", message)


def git_push(repo_dir: Path) -> None:
    _run_git(repo_dir, "push")


def build_commit_message(descriptor: PackageDescriptor, role_name: str) -> str:
    """Commit message for moving a package onto the generic role.

    Example:
        >>> print(build_commit_message(DEFAULT_DESCRIPTOR, "win_package_manager"))
        Refactor: Generic win_package_manager role
        <BLANKLINE>
        - Created generic win_package_manager role
        - Moved VLC config to vars/vlc.yml
        - All tasks now use package_* variables
        - Updated playbooks to use vars_files
        - Old win_vlc role kept for reference (to be removed later)
    """
    lines = [
        f"Refactor: Generic {role_name} role",
        "",
        f"- Created generic {role_name} role",
        f"- Moved {descriptor.name} config to vars/{descriptor.vars_filename}",
        "- All tasks now use package_* variables",
        "- Updated playbooks to use vars_files",
    ]
    if descriptor.legacy_role:
        lines.append(
            f"- Old {descriptor.legacy_role} role kept for reference (to be removed later)"
        )
    return "\n".join(lines)


def commit_and_push(
    repo_dir: Path, paths: list[str], message: str, push: bool = True
) -> CommitResult:
    """Stage paths, commit, and optionally push.

    Args:
        repo_dir: Repository root (the Ansible root).
        paths: Paths relative to repo_dir to stage.
        message: Commit message.
        push: If False, stop after committing.

    Returns:
        CommitResult describing what was done.

    Raises:
        VcsError: On the first failing git command.
    """
    git_add(repo_dir, paths)
    git_commit(repo_dir, message)
    if push:
        git_push(repo_dir)

    return CommitResult(
        staged=list(paths),
        message=message,
        committed=True,
        pushed=push,
    )

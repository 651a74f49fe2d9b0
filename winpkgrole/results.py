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

"""Public API return types for winpkgrole.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Domain types (like
    PackageDescriptor) stay co-located with their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class CommitResult:
    """Result from staging, committing and pushing the generated files.

    Attributes:
        staged: Paths passed to ``git add`` (relative to the Ansible root).
        message: Commit message used.
        committed: True once ``git commit`` succeeded.
        pushed: True once ``git push`` succeeded (False if push was disabled).
    """

    staged: list[str]
    message: str
    committed: bool
    pushed: bool


@dataclass(frozen=True)
class ScaffoldResult:
    """Result from scaffolding a package into the generic role.

    Attributes:
        package_id: Descriptor id (e.g. "vlc").
        package_name: Display name (e.g. "VLC").
        role_dir: Path to roles/<role>/.
        written_files: Every vars/tasks/playbook file written, in write order.
        playbooks: The three playbook paths (auto, force_install, force_uninstall).
        asset_path: Where the installer ZIP was copied to, or None.
        asset_copied: True if the asset was found and copied.
        commit: CommitResult, or None when committing was disabled.
        status: Always "success" for a completed run.
    """

    package_id: str
    package_name: str
    role_dir: Path
    written_files: list[Path]
    playbooks: list[Path]
    asset_path: Path | None
    asset_copied: bool
    commit: CommitResult | None
    status: str


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a package descriptor.

    Attributes:
        status: "valid" or "invalid".
        errors: Error messages (empty if valid).
        warnings: Warning messages.
        descriptor_path: String path to the validated descriptor.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    descriptor_path: str


@dataclass(frozen=True)
class CheckResult:
    """Result from checking an existing scaffolded role.

    Attributes:
        role_dir: Path to roles/<role>/.
        missing: Expected files that do not exist.
        status: "complete" or "incomplete".
    """

    role_dir: Path
    missing: list[Path] = field(default_factory=list)
    status: str = "complete"

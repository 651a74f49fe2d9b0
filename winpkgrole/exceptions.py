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

"""Exception hierarchy for winpkgrole.

This module defines a small exception hierarchy so callers can tell apart the
three ways a scaffolding run can fail:

- ConfigError: Descriptor/configuration errors (YAML parse, missing fields)
- ScaffoldError: Filesystem errors while creating the role tree or files
- VcsError: git add/commit/push failures

All exceptions inherit from WinPkgRoleError, allowing users to catch every
winpkgrole error with a single except clause.

Example:
    Catching specific error types:
        ```python
        from winpkgrole.core import scaffold_package
        from winpkgrole.exceptions import ConfigError, VcsError

        try:
            result = scaffold_package(descriptor, settings)
        except ConfigError as e:
            print(f"Configuration error: {e}")
        except VcsError as e:
            print(f"git error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "WinPkgRoleError",
    "ConfigError",
    "ScaffoldError",
    "VcsError",
]


class WinPkgRoleError(Exception):
    """Base exception for all winpkgrole errors."""

    pass


class ConfigError(WinPkgRoleError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, invalid structure)
    - Missing or invalid package descriptor fields
    - Unsupported apiVersion
    - A missing Ansible root directory
    """

    pass


class ScaffoldError(WinPkgRoleError):
    """Raised when the role tree, task files, or playbooks cannot be written.

    Wraps the underlying OSError so the CLI can report it uniformly.
    """

    pass


class VcsError(WinPkgRoleError):
    """Raised for git failures.

    This exception is raised when:

    - git is not installed or not on PATH
    - git add/commit/push exits with a nonzero status
    - a git command times out
    """

    pass

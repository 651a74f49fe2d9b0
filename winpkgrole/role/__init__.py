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

"""
Generic Windows package role generation.

template.py renders file contents; scaffold.py writes them under the Ansible
root and copies the installer ZIP.

Example:
    from pathlib import Path
    from winpkgrole.descriptor import DEFAULT_DESCRIPTOR
    from winpkgrole.role import create_role_tree, write_playbooks

    role_dir = create_role_tree(Path("~/ansible").expanduser(), "win_package_manager")
"""

from .scaffold import (
    copy_asset,
    create_role_tree,
    verify_role_structure,
    write_playbooks,
    write_task_files,
    write_vars_file,
)

__all__ = [
    "create_role_tree",
    "write_vars_file",
    "write_task_files",
    "write_playbooks",
    "copy_asset",
    "verify_role_structure",
]

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

"""Text rendering for the generic Windows package role.

This module produces the text of every file the scaffolder writes. Nothing
here touches the filesystem outside of reading the bundled task templates.

Private Helpers:
    - _format_yaml_string: Format a Python string as a double-quoted YAML scalar
    - _format_yaml_plain: Leave a string plain unless YAML would misread it
    - _read_task_template: Read one bundled task template

Design Principles:
    - Task files are package-agnostic and shipped verbatim; the Jinja
      expressions inside them belong to Ansible and are never evaluated here
    - Only the role name marker is substituted in task templates
    - Every package-specific value comes from the PackageDescriptor
    - Vars file layout (comments, grouping, quoting) is stable so diffs stay small

Example:
    from winpkgrole.descriptor import DEFAULT_DESCRIPTOR
    from winpkgrole.role.template import render_playbook, render_vars_file

    print(render_vars_file(DEFAULT_DESCRIPTOR))
    print(render_playbook(DEFAULT_DESCRIPTOR, "auto", "win_package_manager"))
"""

from __future__ import annotations

from importlib.resources import files

import yaml

from winpkgrole.descriptor import DEFAULT_ARGUMENTS, MODES, PackageDescriptor

__all__ = [
    "TASK_FILES",
    "ROLE_NAME_MARKER",
    "render_vars_file",
    "render_task_files",
    "render_playbook",
]

# Write order matches the include order in main.yml
TASK_FILES = (
    "main.yml",
    "detect.yml",
    "install.yml",
    "upgrade.yml",
    "uninstall.yml",
    "cleanup.yml",
)

ROLE_NAME_MARKER = "__ROLE_NAME__"

_PLAYBOOK_TITLES = {
    "auto": "Auto-update {name} if installed",
    "force_install": "Force install {name}",
    "force_uninstall": "Force uninstall {name}",
}

# Characters that change the meaning of a plain YAML scalar
_YAML_INDICATORS = set(":#{}[],&*!|>'\"%@`")


def _format_yaml_string(value: str) -> str:
    """Format a Python string as a double-quoted YAML scalar.

    Backslashes and double quotes are escaped, so a Windows path such as
    C:\\Temp\\vlc is written as "C:\\\\Temp\\\\vlc".
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_yaml_plain(value: str) -> str:
    """Return value unquoted when YAML reads it back unchanged, else quoted.

    Words YAML 1.1 resolves to other types (no, yes, null, 1, 1.0) are quoted.
    """
    if (
        not value
        or value != value.strip()
        or any(ch in _YAML_INDICATORS for ch in value)
        or value[0] in "-?"
        or yaml.safe_load(value) != value
    ):
        return _format_yaml_string(value)
    return value


def render_vars_file(descriptor: PackageDescriptor) -> str:
    """Render roles/<role>/vars/<package_id>.yml.

    Args:
        descriptor: Package to describe.

    Returns:
        YAML text. Installer switches are only written when they differ from
        the role default ("/S"), so NSIS packages keep the short layout.
    """
    q = _format_yaml_string
    lines = [
        "---",
        f"# {descriptor.description or descriptor.name} package configuration",
        f"package_name: {q(descriptor.name)}",
        f"package_version: {q(descriptor.version)}",
        f"package_zip: {q(descriptor.zip)}",
        f"package_installer: {q(descriptor.installer)}",
        "",
        "# Registry detection",
        f"package_reg_key: {q(descriptor.reg_key)}",
        f"package_reg_value: {q(descriptor.reg_value)}",
        "",
        "# Temporary paths",
        f"package_temp_dir: {q(descriptor.temp_dir)}",
        f"package_log_file: {q(descriptor.log_file)}",
        "",
        "# Uninstall detection (display name pattern for registry search)",
        f"package_display_name_pattern: {q(descriptor.display_name_pattern)}",
    ]

    switches = []
    if descriptor.install_arguments != DEFAULT_ARGUMENTS:
        switches.append(
            f"package_install_arguments: {q(descriptor.install_arguments)}"
        )
    if descriptor.uninstall_arguments != DEFAULT_ARGUMENTS:
        switches.append(
            f"package_uninstall_arguments: {q(descriptor.uninstall_arguments)}"
        )
    if switches:
        lines += ["", "# Installer switches"] + switches

    return "\n".join(lines) + "\n"


def _read_task_template(name: str) -> str:
    return (files("winpkgrole.role") / "templates" / "tasks" / name).read_text(
        encoding="utf-8"
    )


def render_task_files(role_name: str) -> dict[str, str]:
    """Render the six task files of the role.

    Args:
        role_name: Role directory name, shown in the reboot message.

    Returns:
        Mapping of file name (e.g. "main.yml") to text, in TASK_FILES order.
    """
    return {
        name: _read_task_template(name).replace(ROLE_NAME_MARKER, role_name)
        for name in TASK_FILES
    }


def render_playbook(
    descriptor: PackageDescriptor,
    mode: str,
    role_name: str,
    hosts: str = "windows",
) -> str:
    """Render playbooks/win_<package_id>_<mode>.yml.

    Args:
        descriptor: Package the playbook manages.
        mode: One of "auto", "force_install", "force_uninstall".
        role_name: Role the playbook applies.
        hosts: Inventory host group.

    Returns:
        YAML text pinning the mode and ``reboot: no``.

    Raises:
        ValueError: If mode is unknown.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode {mode!r}. Supported: {', '.join(MODES)}")

    title = _PLAYBOOK_TITLES[mode].format(name=descriptor.name)
    vars_file = f"../roles/{role_name}/vars/{descriptor.vars_filename}"

    return "\n".join(
        [
            "---",
            f"- name: {_format_yaml_plain(title)}",
            f"  hosts: {_format_yaml_plain(hosts)}",
            "  gather_facts: false",
            "  vars_files:",
            f"    - {vars_file}",
            "  roles:",
            f"    - role: {role_name}",
            f"      mode: {mode}",
            "      reboot: no",
        ]
    ) + "\n"

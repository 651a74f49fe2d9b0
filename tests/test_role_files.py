"""
Golden-file tests for the generated role.

Pins the exact text of every task file and playbook written for the VLC
package with the default role name. The only departures from the files the
role was migrated from are the installer switch variables
(package_install_arguments / package_uninstall_arguments, defaulting to /S).
"""

from __future__ import annotations

import pytest

from winpkgrole.descriptor import DEFAULT_DESCRIPTOR, MODES
from winpkgrole.role.template import render_playbook, render_task_files

pytestmark = pytest.mark.unit

ROLE = "win_package_manager"

MAIN_YML = r'''---
# Generic Windows Package Manager
# Input variables expected:
#   - mode: auto | force_install | force_uninstall
#   - reboot: yes | no
#   - Package vars loaded from vars/<package>.yml

- name: Verify mode parameter
  fail:
    msg: "Parameter 'mode' is required: auto, force_install or force_uninstall"
  when: mode is not defined

- name: Verify package configuration loaded
  fail:
    msg: "Package configuration missing. Load vars file first."
  when: package_name is not defined or package_version is not defined

- include_tasks: detect.yml
  register: detect_result

# ====================
#   MODE AUTO
# ====================
- name: "Auto-mode: upgrade if installed and outdated"
  include_tasks: upgrade.yml
  when:
    - mode == "auto"
    - detect_result.installed
    - detect_result.version != package_version

# ====================
#   MODE FORCE INSTALL
# ====================
- name: "Force install: install if absent"
  include_tasks: install.yml
  when:
    - mode == "force_install"
    - not detect_result.installed

- name: "Force install: upgrade if version mismatch"
  include_tasks: upgrade.yml
  when:
    - mode == "force_install"
    - detect_result.installed
    - detect_result.version != package_version

# ====================
#   MODE FORCE UNINSTALL
# ====================
- name: Force uninstall
  include_tasks: uninstall.yml
  when: mode == "force_uninstall"

# ====================
#   CLEANUP
# ====================
- include_tasks: cleanup.yml

# ====================
#   REBOOT HANDLING
# ====================
- name: "Reboot if requested and required"
  ansible.windows.win_reboot:
    msg: "Reboot triggered by win_package_manager ({{ package_name }})"
  when:
    - reboot | default("no") | bool
    - reboot_required | default(false) | bool

# ====================
#   OUTPUT FINAL
# ====================
- name: "Final package status"
  debug:
    msg:
      package: "{{ package_name }}"
      host: "{{ inventory_hostname }}"
      status: "{{ package_status | default('unknown') }}"
      message: "{{ package_message | default('') }}"
      reboot_required: "{{ reboot_required | default(false) }}"
'''

DETECT_YML = r'''---
# Detect package installation via registry

- name: "Read registry key for {{ package_name }}"
  ansible.windows.win_reg_stat:
    path: "{{ package_reg_key }}"
    name: "{{ package_reg_value }}"
  register: reg_pkg

- set_fact:
    installed: "{{ reg_pkg.exists }}"
    version: "{{ reg_pkg.value if reg_pkg.exists else 'absent' }}"

- set_fact:
    detect_result:
      installed: "{{ installed }}"
      version: "{{ version }}"

- name: "Detection result for {{ package_name }}"
  debug:
    msg: "Installed: {{ installed }}, Version: {{ version }}"
'''

INSTALL_YML = r'''---
# Silent installation of package

- name: "Prepare temporary directory"
  ansible.windows.win_file:
    path: "{{ package_temp_dir }}"
    state: directory

- name: "Copy {{ package_name }} ZIP to target"
  ansible.windows.win_copy:
    src: "{{ package_zip }}"
    dest: "{{ package_temp_dir }}\\{{ package_zip }}"

- name: "Extract {{ package_name }} package"
  ansible.windows.win_shell: >
    PowerShell -NoProfile -NonInteractive -Command
    "Expand-Archive -LiteralPath '{{ package_temp_dir }}\\{{ package_zip }}' -DestinationPath '{{ package_temp_dir }}' -Force"
  args:
    creates: "{{ package_temp_dir }}\\{{ package_installer }}"

- name: "Install {{ package_name }} {{ package_version }}"
  ansible.windows.win_package:
    path: "{{ package_temp_dir }}\\{{ package_installer }}"
    arguments: "{{ package_install_arguments | default('/S') }}"
    state: present
    log_path: "{{ package_log_file }}"
  register: install_out

- set_fact:
    package_status: "installed"
    package_message: "{{ package_name }} {{ package_version }} installed"
    reboot_required: "{{ install_out.reboot_required | default(false) }}"
'''

UPGRADE_YML = r'''---
# Silent upgrade of package

- name: "Prepare temporary directory for upgrade"
  ansible.windows.win_file:
    path: "{{ package_temp_dir }}"
    state: directory

- name: "Copy {{ package_name }} ZIP to target (upgrade)"
  ansible.windows.win_copy:
    src: "{{ package_zip }}"
    dest: "{{ package_temp_dir }}\\{{ package_zip }}"

- name: "Extract {{ package_name }} package for upgrade"
  ansible.windows.win_shell: >
    PowerShell -NoProfile -NonInteractive -Command
    "Expand-Archive -LiteralPath '{{ package_temp_dir }}\\{{ package_zip }}' -DestinationPath '{{ package_temp_dir }}' -Force"
  args:
    creates: "{{ package_temp_dir }}\\{{ package_installer }}"

- name: "Upgrade {{ package_name }} to {{ package_version }}"
  ansible.windows.win_package:
    path: "{{ package_temp_dir }}\\{{ package_installer }}"
    arguments: "{{ package_install_arguments | default('/S') }}"
    state: present
    log_path: "{{ package_log_file }}"
  register: upgrade_out

- set_fact:
    package_status: "upgraded"
    package_message: "{{ package_name }} upgraded from {{ detect_result.version }} to {{ package_version }}"
    reboot_required: "{{ upgrade_out.reboot_required | default(false) }}"
'''

UNINSTALL_YML = r'''---
# Clean uninstall via registry uninstall string

- name: "Search {{ package_name }} in registry (uninstall)"
  ansible.windows.win_shell: |
    $paths = @(
      'HKLM:\Software\Microsoft\Windows\CurrentVersion\Uninstall\*',
      'HKLM:\Software\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall\*'
    )

    $app = Get-ItemProperty -Path $paths -ErrorAction SilentlyContinue |
           Where-Object { $_.DisplayName -like '{{ package_display_name_pattern }}' } |
           Select-Object -First 1

    if ($app) {
      $app | Select-Object DisplayName, DisplayVersion, UninstallString, InstallLocation |
        ConvertTo-Json -Compress
    }
  register: pkg_uninstall_raw
  changed_when: false

- name: "Parse {{ package_name }} uninstall info if found"
  set_fact:
    pkg_uninstall_info: "{{ pkg_uninstall_raw.stdout | from_json }}"
  when: pkg_uninstall_raw.stdout is defined and (pkg_uninstall_raw.stdout | length > 0)

- name: "{{ package_name }} not installed: nothing to uninstall"
  set_fact:
    package_status: "unchanged"
    package_message: "{{ package_name }} not installed, no uninstall needed"
  when: pkg_uninstall_info is not defined
        or (pkg_uninstall_info.UninstallString is not defined)
        or (pkg_uninstall_info.UninstallString | string | length == 0)

- name: "Clean UninstallString (remove outer quotes)"
  set_fact:
    pkg_uninstall_path: "{{ pkg_uninstall_info.UninstallString[1:-1] }}"
  when: pkg_uninstall_info.UninstallString is defined
  
- name: "Debug cleaned uninstall path"
  debug:
    msg: "pkg_uninstall_path='{{ pkg_uninstall_path }}'"
  when: pkg_uninstall_path is defined

- name: "Uninstall {{ package_name }} via UninstallString"
  ansible.windows.win_shell: |
    Write-Output "CMD = '{{ pkg_uninstall_path }} {{ package_uninstall_arguments | default('/S') }}'"
    Start-Process -FilePath '{{ pkg_uninstall_path }}' -ArgumentList '{{ package_uninstall_arguments | default('/S') }}' -Wait
  args:
    executable: powershell.exe
  register: uninstall_out
  when: pkg_uninstall_path is defined

- name: "Update status after uninstall"
  set_fact:
    package_status: "{{ 'removed' if uninstall_out.rc == 0 else 'error' }}"
    package_message: >-
      {{ package_name ~ ' uninstalled'
         if uninstall_out.rc == 0
         else package_name ~ ' uninstall error (rc=' ~ uninstall_out.rc ~ ')' }}
    reboot_required: false
  when: uninstall_out is defined
'''

CLEANUP_YML = r'''---
# Cleanup temporary directory

- name: "Cleanup temporary directory for {{ package_name }}"
  ansible.windows.win_file:
    path: "{{ package_temp_dir }}"
    state: absent

- name: "Cleanup complete"
  set_fact:
    package_message: "{{ package_message }} (cleanup OK)"
'''

AUTO_PLAYBOOK = """---
- name: Auto-update VLC if installed
  hosts: windows
  gather_facts: false
  vars_files:
    - ../roles/win_package_manager/vars/vlc.yml
  roles:
    - role: win_package_manager
      mode: auto
      reboot: no
"""

FORCE_INSTALL_PLAYBOOK = """---
- name: Force install VLC
  hosts: windows
  gather_facts: false
  vars_files:
    - ../roles/win_package_manager/vars/vlc.yml
  roles:
    - role: win_package_manager
      mode: force_install
      reboot: no
"""

FORCE_UNINSTALL_PLAYBOOK = """---
- name: Force uninstall VLC
  hosts: windows
  gather_facts: false
  vars_files:
    - ../roles/win_package_manager/vars/vlc.yml
  roles:
    - role: win_package_manager
      mode: force_uninstall
      reboot: no
"""


class TestTaskFileContents:
    """Tests for the exact text of the six task files."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("main.yml", MAIN_YML),
            ("detect.yml", DETECT_YML),
            ("install.yml", INSTALL_YML),
            ("upgrade.yml", UPGRADE_YML),
            ("uninstall.yml", UNINSTALL_YML),
            ("cleanup.yml", CLEANUP_YML),
        ],
    )
    def test_task_file_text(self, name, expected):
        """Test each task file matches its expected text exactly."""
        assert render_task_files(ROLE)[name] == expected

    def test_whitespace_only_line_kept(self):
        """Test the indented blank line in uninstall.yml survives."""
        lines = render_task_files(ROLE)["uninstall.yml"].split("\n")

        assert lines[38] == "  "

    def test_switch_defaults_to_silent(self):
        """Test installer switches fall back to /S."""
        rendered = render_task_files(ROLE)

        assert "-ArgumentList '{{ package_uninstall_arguments | default('/S') }}' -Wait" in (
            rendered["uninstall.yml"]
        )
        for name in ("install.yml", "upgrade.yml"):
            assert "arguments: \"{{ package_install_arguments | default('/S') }}\"" in rendered[name]


class TestPlaybookContents:
    """Tests for the exact text of the three playbooks."""

    @pytest.mark.parametrize(
        "mode,expected",
        [
            ("auto", AUTO_PLAYBOOK),
            ("force_install", FORCE_INSTALL_PLAYBOOK),
            ("force_uninstall", FORCE_UNINSTALL_PLAYBOOK),
        ],
    )
    def test_playbook_text(self, mode, expected):
        """Test each playbook matches its expected text exactly."""
        assert render_playbook(DEFAULT_DESCRIPTOR, mode, ROLE) == expected

    def test_every_mode_covered(self):
        """Test the golden set covers every mode."""
        assert MODES == ("auto", "force_install", "force_uninstall")

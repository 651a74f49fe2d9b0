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

"""Package descriptor for the generic Windows package role.

A package descriptor is the flat key/value record that identifies one piece of
software the role can install, upgrade or uninstall. It is written to
``roles/<role>/vars/<package_id>.yml`` and referenced by the playbooks.

Descriptor files use the same layout as the rest of the configuration:

    apiVersion: winpkgrole/v1
    package:
      id: vlc
      name: VLC
      version: "3.0.23"
      zip: vlc-3.0.23-win64.zip
      installer: vlc-3.0.23-win64.exe
      registry:
        key: 'HKLM:\\Software\\VideoLAN\\VLC'
        value: Version
      temp_dir: 'C:\\Temp\\vlc'
      log_file: 'C:\\Temp\\install_vlc.log'
      display_name_pattern: "VLC media player*"
      legacy_role: win_vlc

Example:
    from winpkgrole.descriptor import DEFAULT_DESCRIPTOR, descriptor_from_config

    pkg = descriptor_from_config(config)
    print(pkg.vars_filename)          # vlc.yml
    print(pkg.playbook_filename("auto"))  # win_vlc_auto.yml
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Any

from winpkgrole.exceptions import ConfigError

__all__ = [
    "MODES",
    "DEFAULT_ARGUMENTS",
    "PackageDescriptor",
    "DEFAULT_DESCRIPTOR",
    "descriptor_from_config",
]

MODES = ("auto", "force_install", "force_uninstall")

# Silent switch used by NSIS installers and uninstallers
DEFAULT_ARGUMENTS = "/S"

PACKAGE_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_]*$")

# descriptor key -> dataclass field, for required string fields
_REQUIRED_FIELDS = {
    "id": "package_id",
    "name": "name",
    "version": "version",
    "zip": "zip",
    "installer": "installer",
    "temp_dir": "temp_dir",
    "log_file": "log_file",
    "display_name_pattern": "display_name_pattern",
}


@dataclass(frozen=True)
class PackageDescriptor:
    """Everything package-specific the generated role needs.

    Attributes:
        package_id: Lowercase identifier used in file and playbook names.
        name: Display name (``package_name`` in the vars file).
        version: Target version the role installs/upgrades to.
        zip: ZIP archive shipped in the role's files/ directory.
        installer: Installer executable inside the ZIP.
        reg_key: Registry key read to detect the installed version.
        reg_value: Registry value holding the installed version.
        temp_dir: Temporary extraction directory on the target.
        log_file: Installer log path on the target.
        display_name_pattern: DisplayName pattern for the uninstall search.
        description: Free text for the vars file header comment.
        install_arguments: Silent install switches.
        uninstall_arguments: Silent uninstall switches.
        legacy_role: Per-package role being replaced (asset source, commit text).
        asset: Explicit path to the installer ZIP to copy into the role.
    """

    package_id: str
    name: str
    version: str
    zip: str
    installer: str
    reg_key: str
    reg_value: str
    temp_dir: str
    log_file: str
    display_name_pattern: str
    description: str = ""
    install_arguments: str = DEFAULT_ARGUMENTS
    uninstall_arguments: str = DEFAULT_ARGUMENTS
    legacy_role: str | None = None
    asset: Path | None = None

    @property
    def vars_filename(self) -> str:
        """Name of the vars file under roles/<role>/vars/."""
        return f"{self.package_id}.yml"

    def playbook_filename(self, mode: str) -> str:
        """Name of the playbook for one of the role modes.

        Raises:
            ValueError: If mode is not one of MODES.
        """
        if mode not in MODES:
            raise ValueError(f"Unknown mode {mode!r}. Supported: {', '.join(MODES)}")
        return f"win_{self.package_id}_{mode}.yml"

    def asset_source(self, ansible_root: Path) -> Path | None:
        """Where the installer ZIP is expected before it is copied.

        An explicit ``asset`` wins; otherwise the ZIP is looked up in the
        legacy role's files/ directory. Relative paths are taken relative to
        the Ansible root.
        """
        if self.asset is not None:
            return self.asset if self.asset.is_absolute() else ansible_root / self.asset
        if self.legacy_role:
            return ansible_root / "roles" / self.legacy_role / "files" / self.zip
        return None


DEFAULT_DESCRIPTOR = PackageDescriptor(
    package_id="vlc",
    name="VLC",
    version="3.0.23",
    zip="vlc-3.0.23-win64.zip",
    installer="vlc-3.0.23-win64.exe",
    reg_key="HKLM:\\Software\\VideoLAN\\VLC",
    reg_value="Version",
    temp_dir="C:\\Temp\\vlc",
    log_file="C:\\Temp\\install_vlc.log",
    display_name_pattern="VLC media player*",
    description="VLC Media Player",
    legacy_role="win_vlc",
)


def _require_str(pkg: dict[str, Any], key: str, prefix: str = "package") -> str:
    value = pkg.get(key)
    # YAML reads 3.10 as 3.1 and 0755 as 493; str() cannot undo that
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        raise ConfigError(
            f"{prefix}.{key} must be quoted (YAML read {value!r} as a number)"
        )
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{prefix}.{key} is required and must be a non-empty string")
    return value


def descriptor_from_config(config: dict[str, Any]) -> PackageDescriptor:
    """Build a PackageDescriptor from a merged configuration.

    Args:
        config: Merged configuration (org defaults + descriptor file). The
            package fields live under the top-level ``package`` mapping;
            ``defaults.install_arguments``/``defaults.uninstall_arguments``
            supply fallbacks for the argument fields.

    Returns:
        The frozen descriptor.

    Raises:
        ConfigError: If the package mapping is missing, a required field is
            missing or empty, or the id is not a valid identifier.
    """
    pkg = config.get("package")
    if not isinstance(pkg, dict):
        raise ConfigError("Descriptor is missing the 'package' mapping")

    values = {attr: _require_str(pkg, key) for key, attr in _REQUIRED_FIELDS.items()}

    if not PACKAGE_ID_PATTERN.match(values["package_id"]):
        raise ConfigError(
            f"package.id {values['package_id']!r} must be lowercase letters, digits "
            f"or underscores (it is used in file names)"
        )

    registry = pkg.get("registry")
    if not isinstance(registry, dict):
        raise ConfigError("package.registry is required (with 'key' and 'value')")
    reg_key = _require_str(registry, "key", "package.registry")
    reg_value = _require_str(registry, "value", "package.registry")

    defaults = config.get("defaults", {}) or {}
    # An empty key in YAML is None, which falls through to the next source
    install_arguments = (
        pkg.get("install_arguments")
        or defaults.get("install_arguments")
        or DEFAULT_ARGUMENTS
    )
    uninstall_arguments = (
        pkg.get("uninstall_arguments")
        or defaults.get("uninstall_arguments")
        or DEFAULT_ARGUMENTS
    )

    asset = pkg.get("asset")

    return PackageDescriptor(
        reg_key=reg_key,
        reg_value=reg_value,
        description=str(pkg.get("description") or values["name"]),
        install_arguments=str(install_arguments),
        uninstall_arguments=str(uninstall_arguments),
        legacy_role=pkg.get("legacy_role") or None,
        asset=Path(asset) if asset else None,
        **values,
    )

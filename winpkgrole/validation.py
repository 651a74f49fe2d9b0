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

"""Package descriptor validation.

Checks a descriptor without writing files or running git, for quick feedback
while writing a new descriptor and for CI pre-checks.

Validation Checks:

- YAML syntax is valid and the top level is a mapping
- apiVersion is supported (when present)
- A ``package`` mapping with every required field is present
- package.id can be used in file names
- package.registry has ``key`` and ``value``

Warnings (the descriptor is still usable):

- package.zip does not end in .zip
- package.registry.key does not start with a known hive (HKLM:, HKCU:, ...)
- package.asset is set but the file does not exist
- Unknown keys under ``package``

Example:
    Validate a descriptor and handle results:
        ```python
        from pathlib import Path
        from winpkgrole.validation import validate_descriptor

        result = validate_descriptor(Path("packages/vlc.yaml"))
        if result.status == "valid":
            print("Descriptor is valid")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from winpkgrole.config import load_effective_config
from winpkgrole.descriptor import PACKAGE_ID_PATTERN
from winpkgrole.exceptions import ConfigError
from winpkgrole.results import ValidationResult

__all__ = ["validate_descriptor"]

REQUIRED_PACKAGE_FIELDS = (
    "id",
    "name",
    "version",
    "zip",
    "installer",
    "temp_dir",
    "log_file",
    "display_name_pattern",
)

OPTIONAL_PACKAGE_FIELDS = (
    "description",
    "install_arguments",
    "uninstall_arguments",
    "legacy_role",
    "asset",
)

REGISTRY_HIVES = ("HKLM:", "HKCU:", "HKCR:", "HKU:", "HKCC:")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_non_empty(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_string_field(
    mapping: dict[str, Any], key: str, label: str, errors: list[str]
) -> None:
    if key not in mapping or mapping[key] is None:
        errors.append(f"Missing required field: {label}")
    elif _is_number(mapping[key]):
        errors.append(f"{label} must be quoted (YAML read {mapping[key]!r} as a number)")
    elif not _is_non_empty(mapping[key]):
        errors.append(f"{label} must be a non-empty string")


def _check_package(pkg: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    for key in REQUIRED_PACKAGE_FIELDS:
        _check_string_field(pkg, key, f"package.{key}", errors)

    package_id = pkg.get("id")
    if isinstance(package_id, str) and package_id and not PACKAGE_ID_PATTERN.match(package_id):
        errors.append(
            f"package.id {package_id!r} must be lowercase letters, digits or underscores"
        )

    registry = pkg.get("registry")
    if not isinstance(registry, dict):
        errors.append("Missing required field: package.registry (with 'key' and 'value')")
    else:
        for key in ("key", "value"):
            _check_string_field(registry, key, f"package.registry.{key}", errors)
        reg_key = registry.get("key")
        if isinstance(reg_key, str) and reg_key and not reg_key.upper().startswith(REGISTRY_HIVES):
            warnings.append(
                f"package.registry.key {reg_key!r} does not start with a registry "
                f"hive ({', '.join(REGISTRY_HIVES)})"
            )

    zip_name = pkg.get("zip")
    if isinstance(zip_name, str) and zip_name and not zip_name.lower().endswith(".zip"):
        warnings.append(f"package.zip {zip_name!r} does not end in .zip")

    asset = pkg.get("asset")
    if isinstance(asset, str) and asset and not Path(asset).is_file():
        warnings.append(f"package.asset not found: {asset}")

    known = {*REQUIRED_PACKAGE_FIELDS, *OPTIONAL_PACKAGE_FIELDS, "registry"}
    for key in pkg:
        if key not in known:
            warnings.append(f"Unknown field: package.{key}")


def validate_descriptor(descriptor_path: Path) -> ValidationResult:
    """Validate a package descriptor file.

    Does NOT:

    - Write any file
    - Run git
    - Check that the Ansible root exists

    Args:
        descriptor_path: Path to the descriptor YAML.

    Returns:
        ValidationResult with status "valid" or "invalid".
    """
    from winpkgrole.logging import get_global_logger

    logger = get_global_logger()
    errors: list[str] = []
    warnings: list[str] = []

    logger.verbose("VALIDATION", f"Validating descriptor: {descriptor_path}")

    try:
        config = load_effective_config(descriptor_path)
    except FileNotFoundError:
        errors.append(f"Descriptor file not found: {descriptor_path}")
        config = None
    except ConfigError as err:
        errors.append(str(err))
        config = None

    if config is not None:
        pkg = config.get("package")
        if not isinstance(pkg, dict):
            errors.append("Missing required field: package")
        else:
            _check_package(pkg, errors, warnings)

    status = "invalid" if errors else "valid"
    logger.verbose(
        "VALIDATION",
        f"Status: {status} ({len(errors)} error(s), {len(warnings)} warning(s))",
    )

    return ValidationResult(
        status=status,
        errors=errors,
        warnings=warnings,
        descriptor_path=str(descriptor_path),
    )

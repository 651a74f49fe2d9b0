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
Configuration loading and merging for winpkgrole.

Configuration Layers
--------------------
1. **Organization defaults** (defaults/org.yaml)
   - Role name, host group, default installer switches, git behaviour
   - Optional; found by walking upward from the descriptor file

2. **Package descriptor** (packages/<id>.yaml)
   - Package-specific values (name, version, registry key, ...)
   - Always required; overrides organization defaults

Merge Behavior
--------------
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Path Resolution
---------------
Relative paths are resolved against the DESCRIPTOR FILE location, so a
descriptor can sit next to its installer ZIP. Currently resolved paths:
  - package.asset

Private Helpers
---------------
_load_yaml_file : Load YAML with error handling
_deep_merge_dicts : Recursive dict merging
_find_defaults_root : Locate defaults directory
_resolve_known_paths : Resolve relative paths to absolute

Error Handling
--------------
- FileNotFoundError: Descriptor file doesn't exist
- ConfigError: YAML parse errors, empty files, non-mapping top level,
  unsupported apiVersion
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from winpkgrole.exceptions import ConfigError

API_VERSION = "winpkgrole/v1"

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """
    Load a YAML file and return the parsed Python object.

    Raises:
      FileNotFoundError - when file does not exist
      ConfigError       - for invalid YAML or an empty file
    """
    if not p.exists():
        raise FileNotFoundError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Defaults discovery
# -------------------------------


def _find_defaults_root(start_dir: Path) -> Path | None:
    """
    Walk upward from 'start_dir' looking for a 'defaults/org.yaml'.
    Returns the 'defaults' directory or None if not found.
    """
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.exists():
            return parent / "defaults"
    return None


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_known_paths(cfg: dict[str, Any], descriptor_dir: Path) -> None:
    """
    Resolve relative path fields inside the merged config (in place).

    Currently handled:
      - cfg["package"]["asset"]
    """
    pkg = cfg.get("package")
    if not isinstance(pkg, dict):
        return
    raw_path = pkg.get("asset")
    if isinstance(raw_path, str) and raw_path:
        p = Path(raw_path).expanduser()
        if not p.is_absolute():
            pkg["asset"] = str((descriptor_dir / p).resolve())


def _check_api_version(data: dict[str, Any], source: Path) -> None:
    api_version = data.get("apiVersion")
    if api_version is not None and api_version != API_VERSION:
        raise ConfigError(
            f"Unsupported apiVersion {api_version!r} in {source} "
            f"(expected {API_VERSION!r})"
        )


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(descriptor_path: Path) -> dict[str, Any]:
    """
    Load and merge the effective configuration for a package descriptor.

    Steps
      1) Read descriptor YAML.
      2) Find defaults root by scanning upwards for 'defaults/org.yaml'.
      3) Load org defaults if found.
      4) Merge: org -> descriptor (dicts deep-merge, lists replace).
      5) Resolve known relative paths (relative to the descriptor directory).

    Returns
      A merged configuration dict ready for descriptor_from_config().

    Raises
      FileNotFoundError if the descriptor file itself is missing,
      ConfigError on YAML errors, non-mapping documents or a wrong apiVersion.
    """
    from winpkgrole.logging import get_global_logger

    logger = get_global_logger()
    descriptor_path = descriptor_path.resolve()
    descriptor_dir = descriptor_path.parent

    logger.verbose("CONFIG", f"Loading descriptor: {descriptor_path}")

    descriptor_obj = _load_yaml_file(descriptor_path)
    if not isinstance(descriptor_obj, dict):
        raise ConfigError(
            f"top-level YAML must be a mapping (dict): {descriptor_path}"
        )
    _check_api_version(descriptor_obj, descriptor_path)

    merged: dict[str, Any] = {}
    layers_merged = 0

    defaults_root = _find_defaults_root(descriptor_dir)
    if defaults_root:
        org_defaults_path = defaults_root / "org.yaml"
        logger.verbose("CONFIG", f"Loading: {org_defaults_path}")
        org_defaults = _load_yaml_file(org_defaults_path)
        if not isinstance(org_defaults, dict):
            raise ConfigError(
                f"top-level YAML must be a mapping (dict): {org_defaults_path}"
            )
        _check_api_version(org_defaults, org_defaults_path)
        logger.debug("CONFIG", yaml.safe_dump(org_defaults, sort_keys=False).rstrip())
        merged = _deep_merge_dicts(merged, org_defaults)
        layers_merged += 1

    merged = _deep_merge_dicts(merged, descriptor_obj)
    layers_merged += 1

    logger.verbose("CONFIG", f"Deep merged {layers_merged} layer(s)")
    logger.debug("CONFIG", "--- Final Merged Configuration ---")
    logger.debug("CONFIG", yaml.safe_dump(merged, sort_keys=False).rstrip())

    _resolve_known_paths(merged, descriptor_dir)

    return merged

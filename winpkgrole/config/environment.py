"""
Run settings for a scaffolding run.

Settings come from, in increasing priority:

1. Built-in defaults (``~/ansible``, ``win_package_manager``, ``windows``)
2. The ``defaults:`` block of defaults/org.yaml
3. WINPKGROLE_* environment variables (optionally from a .env file)
4. Explicit overrides (CLI flags)
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv

from winpkgrole.exceptions import ConfigError

DEFAULT_ANSIBLE_ROOT = Path("~/ansible")
DEFAULT_ROLE_NAME = "win_package_manager"
DEFAULT_HOSTS = "windows"

ENV_PREFIX = "WINPKGROLE_"

# Role names become a directory under roles/ and a path in vars_files
ROLE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")


@dataclass(frozen=True)
class ScaffoldSettings:
    """Where to scaffold and what to do with git afterwards."""

    ansible_root: Path = DEFAULT_ANSIBLE_ROOT
    role_name: str = DEFAULT_ROLE_NAME
    hosts: str = DEFAULT_HOSTS
    commit: bool = True
    push: bool = True

    @property
    def role_dir(self) -> Path:
        return self.ansible_root / "roles" / self.role_name

    @property
    def playbooks_dir(self) -> Path:
        return self.ansible_root / "playbooks"


def _env(key: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{key}")
    return value if value else None


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_settings(
    config: Optional[dict[str, Any]] = None,
    *,
    ansible_root: Optional[Path] = None,
    role_name: Optional[str] = None,
    hosts: Optional[str] = None,
    commit: Optional[bool] = None,
    push: Optional[bool] = None,
    dotenv_path: Optional[Path] = None,
) -> ScaffoldSettings:
    """
    Resolve the effective ScaffoldSettings.

    :param config: Merged configuration; its ``defaults`` block is consulted.
    :param dotenv_path: .env file to load (default: search from the cwd).
    Keyword overrides that are not None win over everything else.
    :raises ConfigError: If the role name could escape roles/ or hosts is blank.
    """
    env_file = dotenv_path or find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
    defaults = (config or {}).get("defaults", {}) or {}
    git_defaults = defaults.get("git", {}) or {}

    root = ansible_root or _env("ANSIBLE_ROOT") or defaults.get("ansible_root")
    root_path = Path(root) if root else DEFAULT_ANSIBLE_ROOT

    role = str(role_name or _env("ROLE_NAME") or defaults.get("role") or DEFAULT_ROLE_NAME)
    if not ROLE_NAME_PATTERN.match(role):
        raise ConfigError(
            f"Invalid role name {role!r}: use letters, digits, '_', '-' or '.' "
            f"and no path separators"
        )

    host_pattern = str(hosts or _env("HOSTS") or defaults.get("hosts") or DEFAULT_HOSTS)
    if not host_pattern.strip() or any(ch in host_pattern for ch in "\r\n"):
        raise ConfigError(f"Invalid hosts pattern {host_pattern!r}: must be a single line")

    return ScaffoldSettings(
        ansible_root=root_path.expanduser(),
        role_name=role,
        hosts=host_pattern,
        commit=commit if commit is not None else _as_bool(
            _env("COMMIT") or git_defaults.get("commit"), True
        ),
        push=push if push is not None else _as_bool(
            _env("PUSH") or git_defaults.get("push"), True
        ),
    )

"""
Pytest configuration and shared fixtures for winpkgrole tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from winpkgrole.logging import SilentLogger, set_global_logger


class RecordingLogger:
    """Logger that keeps every message for assertions."""

    def __init__(self) -> None:
        self.steps: list[tuple[int, int, str]] = []
        self.warnings: list[str] = []
        self.messages: list[tuple[str, str]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.steps.append((step, total, message))

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def verbose(self, prefix: str, message: str) -> None:
        self.messages.append((prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.messages.append((prefix, message))


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """
    Keep tests away from the developer's ~/ansible, .env and WINPKGROLE_* vars.

    Runs every test from its own temporary working directory with a silent
    global logger.
    """
    for key in (
        "ANSIBLE_ROOT",
        "ROLE_NAME",
        "HOSTS",
        "COMMIT",
        "PUSH",
    ):
        monkeypatch.delenv(f"WINPKGROLE_{key}", raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Install and return a RecordingLogger as the global logger."""
    logger = RecordingLogger()
    set_global_logger(logger)
    return logger


@pytest.fixture
def ansible_root(tmp_path: Path) -> Path:
    """An empty Ansible repository root."""
    root = tmp_path / "ansible"
    root.mkdir()
    return root


@pytest.fixture
def sample_descriptor_data() -> dict[str, Any]:
    """
    Provide a complete package descriptor.

    Uses 7-Zip so tests do not accidentally pass by matching the built-in
    VLC defaults.
    """
    return {
        "apiVersion": "winpkgrole/v1",
        "package": {
            "id": "7zip",
            "name": "7-Zip",
            "version": "24.09",
            "zip": "7z2409-x64.zip",
            "installer": "7z2409-x64.exe",
            "registry": {
                "key": "HKLM:\\Software\\7-Zip",
                "value": "Version",
            },
            "temp_dir": "C:\\Temp\\7zip",
            "log_file": "C:\\Temp\\install_7zip.log",
            "display_name_pattern": "7-Zip*",
        },
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("packages/test.yaml", {"key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create

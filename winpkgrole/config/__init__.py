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

"""Configuration loading for winpkgrole.

Two concerns live here:

  - Package descriptor loading, layered on top of organization defaults
    (defaults/org.yaml) with a deep merge (loader.py)
  - Run settings (Ansible root, role name, host group, git behaviour) from
    org defaults, WINPKGROLE_* environment variables and a .env file
    (environment.py)

Example:
    from pathlib import Path
    from winpkgrole.config import load_effective_config, load_settings

    config = load_effective_config(Path("packages/vlc.yaml"))
    settings = load_settings(config)
    print(settings.role_dir)
"""

from .environment import ScaffoldSettings, load_settings
from .loader import load_effective_config

__all__ = ["load_effective_config", "load_settings", "ScaffoldSettings"]

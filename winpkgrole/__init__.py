"""
winpkgrole - Generic Ansible role scaffolding for Windows packages

A small CLI that writes a generic Ansible role for installing, upgrading and
uninstalling Windows software, the per-package vars file and playbooks that
drive it, and then commits and pushes the result with git.

The generated task files are opaque to this tool: they are executed later by
Ansible against Windows hosts. winpkgrole never contacts a Windows host.

Quick Start
-----------
Migrate the bundled VLC package into ~/ansible:

    $ wpkg scaffold

Scaffold another package from a descriptor, without pushing:

    $ wpkg scaffold packages/7zip.yaml --no-push

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    Single-pass orchestration (tree, files, asset, playbooks, git).
config : package
    Descriptor loading with org defaults; run settings from environment.
descriptor : module
    PackageDescriptor and the built-in VLC descriptor.
role : package
    Rendering and writing of role, vars and playbook files.
vcs : module
    git add/commit/push.

Public API
----------
    from winpkgrole.core import load_package, scaffold_package
    from winpkgrole.validation import validate_descriptor
    from winpkgrole.descriptor import DEFAULT_DESCRIPTOR, PackageDescriptor
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Generic Ansible role scaffolding for Windows packages"

from winpkgrole.core import load_package, scaffold_package
from winpkgrole.descriptor import DEFAULT_DESCRIPTOR, PackageDescriptor
from winpkgrole.validation import validate_descriptor

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "load_package",
    "scaffold_package",
    "validate_descriptor",
    "DEFAULT_DESCRIPTOR",
    "PackageDescriptor",
]

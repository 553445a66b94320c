# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/__init__.py
"""
wsl2dev - WSL development environment provisioner

Installs a WSL distribution, creates and binds a non-root default user,
runs a first-boot payload, then installs a Nerd Font, a shell prompt and
points Windows Terminal / VS Code at the font.

Usage as a library:

    from wsl2dev import DistributionProvisioner, ProvisioningRequest, Secret

    request = ProvisioningRequest("Ubuntu", "devuser", Secret.from_str(pw))
    outcome = DistributionProvisioner(logger, ctx).provision(request)
"""

__version__ = "0.1.0"

from .provision import DistributionProvisioner, ProvisioningOutcome, ProvisioningRequest
from .core.secret import Secret
from .wsl import DistributionInspector, StuckStateResolver, SubsystemProbe

__all__ = [
    "__version__",
    "DistributionProvisioner",
    "ProvisioningOutcome",
    "ProvisioningRequest",
    "Secret",
    "DistributionInspector",
    "StuckStateResolver",
    "SubsystemProbe",
]

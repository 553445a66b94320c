# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from .models import ProvisioningOutcome, ProvisioningRequest, validate_username
from .provisioner import DistributionProvisioner

__all__ = [
    "DistributionProvisioner",
    "ProvisioningOutcome",
    "ProvisioningRequest",
    "validate_username",
]

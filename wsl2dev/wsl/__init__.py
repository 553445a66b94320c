# wsl2dev/wsl/__init__.py
from .errors import ErrorCause, classify, is_contention, translate
from .inspector import DistributionInspector, DistributionRecord, DistributionState
from .probe import SubsystemProbe, SubsystemStatus
from .resolver import StuckStateResolver
from .runner import WslResult, WslRunner

__all__ = [
    "ErrorCause",
    "classify",
    "is_contention",
    "translate",
    "DistributionInspector",
    "DistributionRecord",
    "DistributionState",
    "SubsystemProbe",
    "SubsystemStatus",
    "StuckStateResolver",
    "WslResult",
    "WslRunner",
]

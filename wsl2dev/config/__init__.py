# wsl2dev/config/__init__.py
from .config_loader import Config
from .context import RunContext

__all__ = ["Config", "RunContext"]

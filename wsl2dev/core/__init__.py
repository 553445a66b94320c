# wsl2dev/core/__init__.py
from .exceptions import Fatal, PrerequisiteError, Wsl2DevError, WslCommandError
from .secret import Secret

__all__ = ["Fatal", "PrerequisiteError", "Wsl2DevError", "WslCommandError", "Secret"]

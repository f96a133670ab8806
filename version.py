"""Tab Iconizer version and dev-build detection."""
from __future__ import annotations

import os
from typing import Optional

__version__ = "0.3.0-dev"
DEV_MODE_ENV_VAR = "TAB_ICONIZER_DEV_MODE"

_FLAG_ON = frozenset({"1", "true", "yes", "on"})
_FLAG_OFF = frozenset({"0", "false", "no", "off"})


def is_dev_build(version: Optional[str] = None) -> bool:
    """Dev builds log at DEBUG. ``TAB_ICONIZER_DEV_MODE`` wins over the version suffix."""
    flag = os.getenv(DEV_MODE_ENV_VAR, "").strip().lower()
    if flag in _FLAG_ON:
        return True
    if flag in _FLAG_OFF:
        return False
    identifier = (version or __version__).strip().lower()
    return "-dev" in identifier or ".dev" in identifier

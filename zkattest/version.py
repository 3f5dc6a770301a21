"""
Version of the zkattest package.

Can be overridden at build time with the env var ZKATTEST_VERSION.
"""

from __future__ import annotations

import os

__version__ = os.getenv("ZKATTEST_VERSION", "0.1.0")


def version_tuple() -> tuple[int, int, int]:
    """(major, minor, patch) parsed from __version__; non-numeric parts read as 0."""
    parts = (__version__.split("+", 1)[0].split(".") + ["0", "0", "0"])[:3]
    out = []
    for p in parts:
        digits = "".join(ch for ch in p if ch.isdigit())
        out.append(int(digits) if digits else 0)
    return out[0], out[1], out[2]


__all__ = ["__version__", "version_tuple"]

"""Resolve explorer compiler-version strings into exact solc releases."""

from __future__ import annotations

import re

from solverify.core.errors import MalformedVersion
from solverify.core.types import ToolchainVersion

_SEMVER_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")


def resolve(raw: str) -> ToolchainVersion:
    """Parse a version such as ``v0.7.6+commit.7338295f`` into ``0.7.6``.

    Everything from the first ``+`` on is build metadata and is discarded,
    as is a single leading ``v``. What remains must be ``X.Y.Z``.

    Raises:
        MalformedVersion: If the remainder is not a three-part numeric version.
    """
    version = raw.split("+", 1)[0]
    if version.startswith("v"):
        version = version[1:]

    match = _SEMVER_RE.fullmatch(version)
    if not match:
        raise MalformedVersion(f"Unrecognised compiler version: {raw!r}")

    major, minor, patch = (int(part) for part in match.groups())
    return ToolchainVersion(major=major, minor=minor, patch=patch)

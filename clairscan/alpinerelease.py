"""Namespace detector for Alpine Linux layers."""

from __future__ import annotations

import re
from collections.abc import Mapping

from clairscan.featurens import Detector, Namespace

__all__ = ["AlpineReleaseDetector"]

OS_NAME = "alpine"
ALPINE_RELEASE_PATH = "etc/alpine-release"
VERSION_FORMAT = "dpkg"

_VERSION_RE = re.compile(r"^(\d)+\.(\d)+\.(\d)+$", re.ASCII)


class AlpineReleaseDetector(Detector):
    """Reads the release number from ``etc/alpine-release``."""

    def detect(self, files: Mapping[str, bytes]) -> Namespace | None:
        """Return ``alpine:vMAJOR.MINOR`` for the first release line found."""
        data = files.get(ALPINE_RELEASE_PATH)
        if data is None:
            return None
        text = data.decode("utf-8", errors="replace")
        for line in text.split("\n"):
            match = _VERSION_RE.search(line.removesuffix("\r"))
            if match:
                major, minor, _ = match.group(0).split(".")
                return Namespace(f"{OS_NAME}:v{major}.{minor}", VERSION_FORMAT)
        return None

    def required_filenames(self) -> list[str]:
        return [ALPINE_RELEASE_PATH]
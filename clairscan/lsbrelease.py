"""Namespace detector for layers with an ``etc/lsb-release`` file."""

from __future__ import annotations

import re
from collections.abc import Mapping

from clairscan.featurens import Detector, Namespace

__all__ = ["LsbReleaseDetector"]

LSB_RELEASE_PATH = "etc/lsb-release"

_OS_RE = re.compile(r"^DISTRIB_ID=(.*)")
_VERSION_RE = re.compile(r"^DISTRIB_RELEASE=(.*)")

_VERSION_FORMATS = {
    "debian": "dpkg",
    "ubuntu": "dpkg",
    "centos": "rpm",
    "rhel": "rpm",
    "fedora": "rpm",
    "amzn": "rpm",
    "ol": "rpm",
    "oracle": "rpm",
}


def _clean(value: str) -> str:
    return value.lower().replace('"', "")


class LsbReleaseDetector(Detector):
    """Reads ``DISTRIB_ID`` and ``DISTRIB_RELEASE`` from ``etc/lsb-release``."""

    def detect(self, files: Mapping[str, bytes]) -> Namespace | None:
        """Return the namespace named by the lsb-release file, if any."""
        data = files.get(LSB_RELEASE_PATH)
        if data is None:
            return None

        os_name = version = ""
        text = data.decode("utf-8", errors="replace")
        for line in text.split("\n"):
            line = line.removesuffix("\r")
            if match := _OS_RE.search(line):
                os_name = _clean(match.group(1))
            if match := _VERSION_RE.search(line):
                version = _clean(match.group(1))
                # The minor release matters for Ubuntu but not for Debian or CentOS.
                if os_name in ("centos", "debian"):
                    version = version.split(".", 1)[0]

        version_format = _VERSION_FORMATS.get(os_name)
        if version_format is None or not version:
            return None
        return Namespace(f"{os_name}:{version}", version_format)

    def required_filenames(self) -> list[str]:
        return [LSB_RELEASE_PATH]
"""Namespace detector for layers with an os-release file."""

from __future__ import annotations

import re
from collections.abc import Mapping

from clairscan.featurens import Detector, Namespace

__all__ = ["OsReleaseDetector"]

_OS_RE = re.compile(r"^ID=(.*)")
_VERSION_RE = re.compile(r"^VERSION_ID=(.*)")

# Layers holding any of these are left to more specific detectors.
_EXCLUDING_FILENAMES = (
    "etc/oracle-release",
    "etc/redhat-release",
    "usr/lib/centos-release",
)

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


class OsReleaseDetector(Detector):
    """Reads ``ID`` and ``VERSION_ID`` from the os-release files."""

    def detect(self, files: Mapping[str, bytes]) -> Namespace | None:
        """Return the namespace named by the os-release files, if any."""
        if any(path in files for path in _EXCLUDING_FILENAMES):
            return None

        os_name = version = ""
        for path in self.required_filenames():
            data = files.get(path)
            if data is None:
                continue
            for line in data.decode("utf-8", errors="replace").split("\n"):
                line = line.removesuffix("\r")
                if match := _OS_RE.search(line):
                    os_name = _clean(match.group(1))
                if match := _VERSION_RE.search(line):
                    version = _clean(match.group(1))

        version_format = _VERSION_FORMATS.get(os_name)
        if version_format is None or not version:
            return None
        return Namespace(f"{os_name}:{version}", version_format)

    def required_filenames(self) -> list[str]:
        return ["etc/os-release", "usr/lib/os-release"]
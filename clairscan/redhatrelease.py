"""Namespace detector for CentOS, Oracle and Red Hat like layers."""

from __future__ import annotations

import re
from collections.abc import Mapping

from clairscan.featurens import Detector, Namespace

__all__ = ["RedhatReleaseDetector"]

VERSION_FORMAT = "rpm"

_ORACLE_RE = re.compile(
    r"(?P<os>[^\s]*) (Linux Server release) (?P<version>[\d]+)", re.ASCII
)
_CENTOS_RE = re.compile(
    r"(?P<os>[^\s]*) (Linux release|release) (?P<version>[\d]+)", re.ASCII
)
_REDHAT_RE = re.compile(
    r"(?P<os>Red Hat Enterprise Linux) "
    r"(Client release|Server release|Workstation release) (?P<version>[\d]+)",
    re.ASCII,
)


class RedhatReleaseDetector(Detector):
    """Reads the release line of redhat-release-like files."""

    def detect(self, files: Mapping[str, bytes]) -> Namespace | None:
        """Return the namespace of the first release file that matches."""
        for path in self.required_filenames():
            data = files.get(path)
            if data is None:
                continue
            text = data.decode("utf-8", errors="replace")

            if match := _ORACLE_RE.search(text):
                return Namespace(
                    f"{match.group('os').lower()}:{match.group('version')}",
                    VERSION_FORMAT,
                )
            # Red Hat Enterprise Linux is treated as CentOS.
            if match := _REDHAT_RE.search(text):
                return Namespace(f"centos:{match.group('version')}", VERSION_FORMAT)
            if match := _CENTOS_RE.search(text):
                return Namespace(
                    f"{match.group('os').lower()}:{match.group('version')}",
                    VERSION_FORMAT,
                )
        return None

    def required_filenames(self) -> list[str]:
        return [
            "etc/oracle-release",
            "etc/centos-release",
            "etc/redhat-release",
            "etc/system-release",
        ]
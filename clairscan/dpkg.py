"""Feature lister for the dpkg status database."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping

from clairscan.featurefmt import Feature, Lister

__all__ = ["DpkgLister"]

log = logging.getLogger(__name__)

VERSION_FORMAT = "dpkg"
STATUS_PATH = "var/lib/dpkg/status"

_SOURCE_RE = re.compile(r"Source: (?P<name>[^\s]*)( \((?P<version>.*)\))?", re.ASCII)


def _lines(data: bytes) -> Iterator[str]:
    parts = data.decode("utf-8", errors="replace").split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    for part in parts:
        yield part.removesuffix("\r")


class DpkgLister(Lister):
    """Lists the packages recorded in ``var/lib/dpkg/status``.

    A version given on a ``Source:`` line takes precedence over the one on
    the ``Version:`` line, and source package names replace binary names.
    """

    def list_features(self, files: Mapping[str, bytes]) -> list[Feature]:
        """Return the distinct source packages installed in the layer."""
        data = files.get(STATUS_PATH)
        if data is None:
            return []

        found: dict[str, Feature] = {}
        name = version = ""
        for line in _lines(data):
            if line.startswith("Package: "):
                name = line.removeprefix("Package: ").strip()
                version = ""
            elif line.startswith("Source: "):
                match = _SOURCE_RE.search(line)
                name = (match.group("name") or "").strip()
                source_version = (match.group("version") or "").strip()
                if source_version:
                    version = source_version
            elif line.startswith("Version: ") and not version:
                candidate = line.removeprefix("Version: ")
                if candidate:
                    version = candidate
                else:
                    log.warning("could not parse package version. skipping")
            elif line == "":
                name = version = ""

            if name and version:
                found[f"{name}#{version}"] = Feature(name, version, VERSION_FORMAT)
                name = version = ""

        return list(found.values())

    def required_filenames(self) -> list[str]:
        return [STATUS_PATH]
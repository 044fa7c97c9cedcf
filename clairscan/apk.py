"""Feature lister for the Alpine package manager's database."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from clairscan.featurefmt import Feature, Lister

__all__ = ["ApkLister"]

log = logging.getLogger(__name__)

VERSION_FORMAT = "dpkg"
INSTALLED_PATH = "lib/apk/db/installed"


def _lines(data: bytes) -> Iterator[str]:
    parts = data.decode("utf-8", errors="replace").split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    for part in parts:
        yield part.removesuffix("\r")


class ApkLister(Lister):
    """Lists the packages recorded in ``lib/apk/db/installed``."""

    def list_features(self, files: Mapping[str, bytes]) -> list[Feature]:
        """Return the distinct packages installed in the layer."""
        data = files.get(INSTALLED_PATH)
        if data is None:
            return []

        found: dict[str, Feature] = {}
        name = version = ""
        for line in _lines(data):
            if len(line) < 2:
                continue
            prefix, value = line[:2], line[2:]
            if prefix == "P:":
                name = value
            elif prefix == "V:":
                if value:
                    version = value
                else:
                    log.warning("could not parse package version. skipping")

            if name and version:
                found[f"{name}#{version}"] = Feature(name, version, VERSION_FORMAT)
                name = version = ""

        return list(found.values())

    def required_filenames(self) -> list[str]:
        return [INSTALLED_PATH]
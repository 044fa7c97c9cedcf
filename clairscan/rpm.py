"""Feature lister for RPM databases, queried with the ``rpm`` tool."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from collections.abc import Mapping
from pathlib import Path

from clairscan.featurefmt import Feature, Lister

__all__ = ["RpmLister"]

log = logging.getLogger(__name__)

VERSION_FORMAT = "rpm"
PACKAGES_PATH = "var/lib/rpm/Packages"
_QUERY_FORMAT = "%{NAME} %{EPOCH}:%{VERSION}-%{RELEASE}\n"


class RpmLister(Lister):
    """Lists binary packages from ``var/lib/rpm/Packages``."""

    def list_features(self, files: Mapping[str, bytes]) -> list[Feature]:
        """Return the distinct packages installed in the layer.

        If the ``rpm`` query fails the database is taken to be unreadable and
        no features are returned.
        """
        data = files.get(PACKAGES_PATH)
        if data is None:
            return []

        try:
            with tempfile.TemporaryDirectory(prefix="rpm") as tmp_dir:
                (Path(tmp_dir) / "Packages").write_bytes(data)
                output = self._query(tmp_dir)
        except OSError:
            log.exception("could not create temporary files for RPM detection")
            raise

        if output is None:
            return []

        found: dict[str, Feature] = {}
        for line in output.splitlines():
            fields = line.split(" ")
            if len(fields) != 2:
                # Some rpm versions print warnings among the results.
                continue
            name, raw_version = fields
            # gpg-pubkey entries only hold GPG keys and are not versioned.
            if name == "gpg-pubkey":
                continue
            version = raw_version.replace("(none):", "")
            if not version:
                log.warning("could not parse package version %r. skipping", raw_version)
                continue
            found[f"{name}#{version}"] = Feature(name, version, VERSION_FORMAT)

        return list(found.values())

    @staticmethod
    def _query(db_path: str) -> str | None:
        try:
            result = subprocess.run(
                ["rpm", "--dbpath", db_path, "-qa", "--qf", _QUERY_FORMAT],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError:
            log.exception("could not query RPM")
            return None
        output = result.stdout.decode("utf-8", errors="replace")
        if result.returncode != 0:
            log.error("could not query RPM: %s", output)
            return None
        return output

    def required_filenames(self) -> list[str]:
        return [PACKAGES_PATH]
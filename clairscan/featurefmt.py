"""Registry of listers that find the features present in an image layer."""

from __future__ import annotations

import abc
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

__all__ = ["Feature", "Lister", "ListerRegistry"]

log = logging.getLogger(__name__)

FilesMap = Mapping[str, bytes]


@dataclass(frozen=True)
class Feature:
    """A package found in a layer."""

    name: str
    version: str
    version_format: str = ""


class Lister(abc.ABC):
    """Lists the features present in an image layer."""

    @abc.abstractmethod
    def list_features(self, files: FilesMap) -> list[Feature]:
        """Return the features found in ``files``."""

    @abc.abstractmethod
    def required_filenames(self) -> list[str]:
        """Return the paths, without leading slash, that list_features reads."""


class ListerRegistry:
    """Named listers, grouped by the version format they produce."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._listers: dict[str, Lister] = {}
        self._by_format: dict[str, list[str]] = {}

    def register(self, name: str, version_format: str, lister: Lister) -> None:
        """Make ``lister`` available under ``name``."""
        if not name:
            raise ValueError("featurefmt: could not register a Lister with an empty name")
        if lister is None:
            raise ValueError("featurefmt: could not register a nil Lister")
        with self._lock:
            if name in self._listers:
                raise ValueError(f"featurefmt: RegisterLister called twice for {name}")
            self._listers[name] = lister
            self._by_format.setdefault(version_format, []).append(name)

    def list_features(
        self, files: FilesMap, lister_names: Iterable[str]
    ) -> list[Feature]:
        """Run the named listers on ``files`` and collect their features."""
        features: list[Feature] = []
        with self._lock:
            for name in lister_names:
                lister = self._listers.get(name)
                if lister is None:
                    log.warning("Unknown Lister: %s", name)
                    continue
                features.extend(lister.list_features(files))
        return features

    def required_filenames(self, lister_names: Iterable[str]) -> list[str]:
        """Return the files needed by every registered lister."""
        with self._lock:
            return [
                filename
                for lister in self._listers.values()
                for filename in lister.required_filenames()
            ]

    def names(self) -> list[str]:
        """Return the names of all registered listers."""
        with self._lock:
            return list(self._listers)
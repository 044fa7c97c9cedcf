"""Registry of detectors that find the namespace of an image layer's features."""

from __future__ import annotations

import abc
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

__all__ = ["Namespace", "Detector", "DetectorRegistry"]

log = logging.getLogger(__name__)

FilesMap = Mapping[str, bytes]


@dataclass(frozen=True)
class Namespace:
    """A namespace such as ``debian:8`` and the version format it uses."""

    name: str
    version_format: str = ""


class Detector(abc.ABC):
    """Detects a namespace from the files of an image layer."""

    @abc.abstractmethod
    def detect(self, files: FilesMap) -> Namespace | None:
        """Return the namespace found in ``files``, or None."""

    @abc.abstractmethod
    def required_filenames(self) -> list[str]:
        """Return the paths, without leading slash, that detect reads."""


class DetectorRegistry:
    """Named namespace detectors."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._detectors: dict[str, Detector] = {}

    def register(self, name: str, detector: Detector) -> None:
        """Make ``detector`` available under ``name``."""
        if not name:
            raise ValueError("namespace: could not register a Detector with an empty name")
        if detector is None:
            raise ValueError("namespace: could not register a nil Detector")
        with self._lock:
            if name in self._detectors:
                raise ValueError(f"namespace: RegisterDetector called twice for {name}")
            self._detectors[name] = detector

    def detect(
        self, files: FilesMap, detector_names: Iterable[str]
    ) -> list[Namespace]:
        """Run the named detectors and return the distinct namespaces found."""
        found: dict[str, Namespace] = {}
        with self._lock:
            for name in detector_names:
                detector = self._detectors.get(name)
                if detector is None:
                    log.warning("Unknown namespace detector: %s", name)
                    continue
                try:
                    namespace = detector.detect(files)
                except Exception:
                    log.warning("failed while attempting to detect namespace: %s", name)
                    raise
                if namespace is not None:
                    log.debug("detected namespace %s with %s", namespace.name, name)
                    found[namespace.name] = namespace
        return list(found.values())

    def required_filenames(self, detector_names: Iterable[str]) -> list[str]:
        """Return the files needed by every registered detector."""
        with self._lock:
            return [
                filename
                for detector in self._detectors.values()
                for filename in detector.required_filenames()
            ]

    def names(self) -> list[str]:
        """Return the names of all registered detectors."""
        with self._lock:
            return list(self._detectors)
"""Registry of extractors that pull files out of container image layers."""

from __future__ import annotations

import abc
import logging
import ssl
import threading
import urllib.error
import urllib.request
from collections.abc import Iterable, Mapping
from contextlib import closing
from typing import BinaryIO

from clairscan.pagination import BadRequestError

__all__ = [
    "LayerNotFoundError",
    "UnsupportedFormatError",
    "Extractor",
    "ExtractorRegistry",
]

log = logging.getLogger(__name__)

FilesMap = dict[str, bytes]


class LayerNotFoundError(BadRequestError):
    """Raised when a layer cannot be downloaded or opened."""

    def __init__(self, message: str = "could not find layer from given path") -> None:
        super().__init__(message)


class UnsupportedFormatError(BadRequestError):
    """Raised when no extractor is registered for an image format."""

    def __init__(self, image_format: str) -> None:
        super().__init__(f"unsupported image format '{image_format}'")
        self.image_format = image_format


class Extractor(abc.ABC):
    """Extracts files from one container image format."""

    @abc.abstractmethod
    def extract_files(self, layer: BinaryIO, filenames: list[str]) -> FilesMap:
        """Read ``layer`` and return the contents of the requested files."""


class ExtractorRegistry:
    """Named extractors and the means to fetch the layers they read."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._extractors: dict[str, Extractor] = {}
        self._insecure_tls = False

    def register(self, name: str, extractor: Extractor) -> None:
        """Make ``extractor`` available under the lower-cased ``name``."""
        if not name:
            raise ValueError("imagefmt: could not register an Extractor with an empty name")
        if extractor is None:
            raise ValueError("imagefmt: could not register a nil Extractor")
        key = name.lower()
        with self._lock:
            if key in self._extractors:
                raise ValueError(f"imagefmt: RegisterExtractor called twice for {key}")
            self._extractors[key] = extractor

    def unregister(self, name: str) -> None:
        """Remove the extractor registered under ``name``, if any."""
        with self._lock:
            self._extractors.pop(name, None)

    def extractors(self) -> dict[str, Extractor]:
        """Return a copy of the registered extractors by name."""
        with self._lock:
            return dict(self._extractors)

    def set_insecure_tls(self, insecure: bool) -> None:
        """Choose whether certificates and host names go unverified on download."""
        self._insecure_tls = insecure

    def extract(
        self,
        format: str,
        path: str,
        headers: Mapping[str, str] | None,
        to_extract: Iterable[str],
    ) -> FilesMap:
        """Open a layer from disk or over HTTP and extract the named files."""
        layer = self._open_layer(path, headers)
        with closing(layer):
            extractor = self.extractors().get(format.lower())
            if extractor is None:
                raise UnsupportedFormatError(format)
            return extractor.extract_files(layer, list(to_extract))

    def _open_layer(self, path: str, headers: Mapping[str, str] | None) -> BinaryIO:
        if path.startswith(("http://", "https://")):
            return self._download(path, headers)
        try:
            return open(path, "rb")
        except OSError as exc:
            raise LayerNotFoundError() from exc

    def _download(self, url: str, headers: Mapping[str, str] | None) -> BinaryIO:
        try:
            request = urllib.request.Request(url, headers=dict(headers or {}), method="GET")
        except ValueError as exc:
            raise LayerNotFoundError() from exc

        context = ssl.create_default_context()
        if self._insecure_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        try:
            response = urllib.request.urlopen(request, context=context)
        except urllib.error.HTTPError as exc:
            exc.close()
            log.warning("could not download layer: expected 2XX, got %s", exc.code)
            raise LayerNotFoundError() from exc
        except (urllib.error.URLError, OSError, ValueError) as exc:
            log.warning("could not download layer: %s", exc)
            raise LayerNotFoundError() from exc

        if response.status // 100 != 2:
            response.close()
            log.warning("could not download layer: expected 2XX, got %s", response.status)
            raise LayerNotFoundError()
        return response
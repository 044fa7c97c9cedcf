import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from clairscan.imagefmt import (
    Extractor,
    ExtractorRegistry,
    LayerNotFoundError,
    UnsupportedFormatError,
)
from clairscan.pagination import BadRequestError


class RecordingExtractor(Extractor):
    def __init__(self):
        self.layer = None
        self.filenames = None

    def extract_files(self, layer, filenames):
        self.layer = layer
        self.filenames = filenames
        return {"content": layer.read()}


class FailingExtractor(Extractor):
    def extract_files(self, layer, filenames):
        raise RuntimeError("broken layer")


class _Handler(BaseHTTPRequestHandler):
    seen_headers = {}

    def do_GET(self):
        _Handler.seen_headers = dict(self.headers)
        if self.path == "/layer.tar":
            body = b"layer-bytes"
            self.send_response(200)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        else:
            self.send_response(404)
            self.send_header("Content-Length", "0")
            self.end_headers()

    def log_message(self, *args):
        pass


@pytest.fixture
def server_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def layer_file(tmp_path):
    path = tmp_path / "layer.tar"
    path.write_bytes(b"local-layer")
    return path


def test_register_rejects_empty_name():
    with pytest.raises(ValueError):
        ExtractorRegistry().register("", RecordingExtractor())


def test_register_rejects_none():
    with pytest.raises(ValueError):
        ExtractorRegistry().register("docker", None)


def test_register_rejects_duplicate_ignoring_case():
    registry = ExtractorRegistry()
    registry.register("Docker", RecordingExtractor())
    with pytest.raises(ValueError):
        registry.register("docker", RecordingExtractor())


def test_extractors_are_stored_lowercase_and_copied():
    registry = ExtractorRegistry()
    extractor = RecordingExtractor()
    registry.register("ACI", extractor)
    snapshot = registry.extractors()
    assert snapshot == {"aci": extractor}
    snapshot.clear()
    assert registry.extractors() == {"aci": extractor}


def test_unregister_removes_extractor():
    registry = ExtractorRegistry()
    registry.register("docker", RecordingExtractor())
    registry.unregister("docker")
    assert registry.extractors() == {}


def test_extract_local_file(layer_file):
    registry = ExtractorRegistry()
    extractor = RecordingExtractor()
    registry.register("docker", extractor)
    files = registry.extract("DOCKER", str(layer_file), None, ["etc/os-release"])
    assert files == {"content": b"local-layer"}
    assert extractor.filenames == ["etc/os-release"]
    assert extractor.layer.closed


def test_extract_missing_file_raises(tmp_path):
    registry = ExtractorRegistry()
    registry.register("docker", RecordingExtractor())
    with pytest.raises(LayerNotFoundError) as info:
        registry.extract("docker", str(tmp_path / "absent.tar"), None, [])
    assert isinstance(info.value, BadRequestError)
    assert str(info.value) == "could not find layer from given path"


def test_extract_unsupported_format(layer_file):
    registry = ExtractorRegistry()
    with pytest.raises(UnsupportedFormatError) as info:
        registry.extract("OCI", str(layer_file), None, [])
    assert str(info.value) == "unsupported image format 'OCI'"


def test_extractor_errors_propagate(layer_file):
    registry = ExtractorRegistry()
    registry.register("docker", FailingExtractor())
    with pytest.raises(RuntimeError, match="broken layer"):
        registry.extract("docker", str(layer_file), None, [])


def test_extract_over_http_sends_headers(server_url):
    registry = ExtractorRegistry()
    extractor = RecordingExtractor()
    registry.register("docker", extractor)
    files = registry.extract(
        "docker", server_url + "/layer.tar", {"X-Layer-Test": "yes"}, ["a"]
    )
    assert files == {"content": b"layer-bytes"}
    assert _Handler.seen_headers.get("X-Layer-Test") == "yes"
    assert extractor.layer.closed


def test_extract_over_http_non_2xx(server_url):
    registry = ExtractorRegistry()
    registry.register("docker", RecordingExtractor())
    with pytest.raises(LayerNotFoundError):
        registry.extract("docker", server_url + "/missing.tar", None, [])


def test_extract_over_http_unreachable():
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    registry = ExtractorRegistry()
    registry.register("docker", RecordingExtractor())
    with pytest.raises(LayerNotFoundError):
        registry.extract("docker", f"http://127.0.0.1:{port}/layer.tar", None, [])


def test_insecure_tls_still_downloads_plain_http(server_url):
    registry = ExtractorRegistry()
    registry.register("docker", RecordingExtractor())
    registry.set_insecure_tls(True)
    files = registry.extract("docker", server_url + "/layer.tar", {}, [])
    assert files == {"content": b"layer-bytes"}
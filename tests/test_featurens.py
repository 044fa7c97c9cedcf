import pytest

from clairscan.featurens import Detector, DetectorRegistry, Namespace


class _FileDetector(Detector):
    def __init__(self, path, namespace):
        self.path = path
        self.namespace = namespace

    def detect(self, files):
        return self.namespace if self.path in files else None

    def required_filenames(self):
        return [self.path]


class _FailingDetector(Detector):
    def detect(self, files):
        raise RuntimeError("boom")

    def required_filenames(self):
        return ["broken"]


def _registry():
    registry = DetectorRegistry()
    registry.register(
        "os-release", _FileDetector("etc/os-release", Namespace("debian:8", "dpkg"))
    )
    registry.register(
        "alpine-release",
        _FileDetector("etc/alpine-release", Namespace("alpine:v3.3", "dpkg")),
    )
    registry.register(
        "lsb-release", _FileDetector("etc/lsb-release", Namespace("debian:8", "dpkg"))
    )
    return registry


def test_detect_multiple_namespaces():
    registry = _registry()
    files = {"etc/os-release": b"", "etc/alpine-release": b"3.3.4"}
    result = registry.detect(files, registry.names())
    assert sorted(ns.name for ns in result) == ["alpine:v3.3", "debian:8"]


def test_detect_deduplicates_by_name():
    registry = _registry()
    files = {"etc/os-release": b"", "etc/lsb-release": b""}
    result = registry.detect(files, registry.names())
    assert result == [Namespace("debian:8", "dpkg")]


def test_detect_nothing_found():
    registry = _registry()
    assert registry.detect({}, registry.names()) == []


def test_detect_skips_unknown_names():
    registry = _registry()
    result = registry.detect({"etc/os-release": b""}, ["nope", "os-release"])
    assert result == [Namespace("debian:8", "dpkg")]


def test_detect_only_named():
    registry = _registry()
    result = registry.detect({"etc/os-release": b""}, ["alpine-release"])
    assert result == []


def test_detect_propagates_errors():
    registry = _registry()
    registry.register("bad", _FailingDetector())
    with pytest.raises(RuntimeError):
        registry.detect({}, ["os-release", "bad"])


def test_required_filenames_covers_all_detectors():
    registry = _registry()
    assert sorted(registry.required_filenames([])) == [
        "etc/alpine-release",
        "etc/lsb-release",
        "etc/os-release",
    ]


def test_names():
    assert sorted(_registry().names()) == ["alpine-release", "lsb-release", "os-release"]


def test_register_duplicate():
    registry = _registry()
    with pytest.raises(ValueError):
        registry.register("os-release", _FailingDetector())


def test_register_empty_name():
    with pytest.raises(ValueError):
        DetectorRegistry().register("", _FailingDetector())


def test_register_none():
    with pytest.raises(ValueError):
        DetectorRegistry().register("x", None)


def test_detector_is_abstract():
    with pytest.raises(TypeError):
        Detector()
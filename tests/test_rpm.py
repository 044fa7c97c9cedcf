import subprocess
from pathlib import Path
from unittest import mock

from clairscan.featurefmt import Feature
from clairscan.rpm import RpmLister

RPM_OUTPUT = (
    b"warning: Generating 12 missing index(es), please wait...\n"
    b"centos-release (none):7-1.1503.el7.centos.2.8\n"
    b"centos-release (none):7-1.1503.el7.centos.2.8\n"
    b"filesystem (none):3.2-18.el7\n"
    b"filesystem (none):3.2-18.el7\n"
    b"gpg-pubkey (none):f4a80eb5-53a7ff4b\n"
)


def _completed(args, stdout, returncode=0):
    return subprocess.CompletedProcess(args, returncode, stdout=stdout)


def test_rpm_feature_detection():
    seen = {}

    def fake_run(args, **kwargs):
        db_path = args[args.index("--dbpath") + 1]
        seen["db"] = (Path(db_path) / "Packages").read_bytes()
        seen["args"] = args
        return _completed(args, RPM_OUTPUT)

    with mock.patch("subprocess.run", side_effect=fake_run):
        features = RpmLister().list_features({"var/lib/rpm/Packages": b"db-bytes"})

    assert seen["db"] == b"db-bytes"
    assert seen["args"][0] == "rpm"
    assert "-qa" in seen["args"]
    assert set(features) == {
        Feature("centos-release", "7-1.1503.el7.centos.2.8", "rpm"),
        Feature("filesystem", "3.2-18.el7", "rpm"),
    }
    assert len(features) == 2


def test_epoch_is_kept():
    output = b"bash 1:4.2.46-12.el7\n"
    with mock.patch("subprocess.run", return_value=_completed([], output)):
        features = RpmLister().list_features({"var/lib/rpm/Packages": b"x"})
    assert features == [Feature("bash", "1:4.2.46-12.el7", "rpm")]


def test_failed_query_gives_no_features():
    with mock.patch("subprocess.run", return_value=_completed([], b"error", 1)):
        features = RpmLister().list_features({"var/lib/rpm/Packages": b"x"})
    assert features == []


def test_missing_rpm_tool_gives_no_features():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("rpm")):
        features = RpmLister().list_features({"var/lib/rpm/Packages": b"x"})
    assert features == []


def test_missing_file_gives_no_features():
    assert RpmLister().list_features({}) == []


def test_required_filenames():
    assert RpmLister().required_filenames() == ["var/lib/rpm/Packages"]
import base64
import hashlib
import json
import subprocess
from datetime import datetime, timezone

import pytest

from immprune import photos
from immprune.errors import (
    LocalAccessError,
    LocalParseError,
    LocalToolMissingError,
    UnsupportedPlatformError,
)

RECORDS = [
    {
        "uuid": "A1",
        "original_filename": "IMG_0001.HEIC",
        "original_filesize": 2048,
        "date": "2021-05-01T12:00:00+02:00",
        "ismovie": False,
        "path": "/Photos/IMG_0001.HEIC",
    },
    {
        "uuid": "B2",
        "original_filename": "CLIP.MOV",
        "original_filesize": None,
        "date": "",
        "ismovie": True,
    },
]


def _runner(stdout="", returncode=0, stderr="", calls=None):
    def run(cmd, **kwargs):
        if calls is not None:
            calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    return run


def test_parse_normalizes_records():
    assets = photos.parse_local_assets(json.dumps(RECORDS))
    a, b = assets
    assert a.filename == "img_0001.heic"
    assert a.size == 2048
    assert a.date == datetime(2021, 5, 1, 10, tzinfo=timezone.utc)
    assert a.path == "/Photos/IMG_0001.HEIC"
    assert b.size == 0
    assert b.date is None
    assert b.is_video and b.kind == "VIDEO"


def test_parse_videos_only_post_filter():
    assets = photos.parse_local_assets(json.dumps(RECORDS), only_videos=True)
    assert [a.uuid for a in assets] == ["B2"]


@pytest.mark.parametrize("payload", ["not json", '{"uuid": "x"}', "[1, 2]"], ids=["garbage", "object", "scalars"])
def test_parse_fails_hard_on_malformed_output(payload):
    with pytest.raises(LocalParseError):
        photos.parse_local_assets(payload)


def test_unsupported_platform():
    with pytest.raises(UnsupportedPlatformError):
        photos.read_local_assets(platform="linux", runner=_runner("[]"))


def test_jxa_backend_filters_after_the_fact():
    calls = []
    assets = photos.read_local_assets(
        only_videos=True, backend="jxa", platform="darwin", runner=_runner(json.dumps(RECORDS), calls=calls)
    )
    assert calls[0][:3] == ["osascript", "-l", "JavaScript"]
    assert "--only-movies" not in calls[0]
    assert [a.uuid for a in assets] == ["B2"]


def test_osxphotos_backend_passes_native_filter():
    calls = []
    photos.read_local_assets(
        only_videos=True, backend="osxphotos", platform="darwin", runner=_runner("[]", calls=calls)
    )
    assert calls == [["osxphotos", "query", "--json", "--only-movies"]]


def test_missing_tool():
    def run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    with pytest.raises(LocalToolMissingError) as exc:
        photos.read_local_assets(backend="osxphotos", platform="darwin", runner=run)
    assert exc.value.tool == "osxphotos"


def test_denied_automation():
    run = _runner(returncode=1, stderr="execution error: Not authorized to send Apple events to Photos. (-1743)")
    with pytest.raises(LocalAccessError, match="Not authorized"):
        photos.read_local_assets(platform="darwin", runner=run)


def test_unknown_backend():
    with pytest.raises(ValueError):
        photos.build_command("picasa")


def test_attach_checksums(tmp_path, make_local):
    f = tmp_path / "IMG_1.JPG"
    f.write_bytes(b"hello immich")
    expected = base64.b64encode(hashlib.sha1(b"hello immich").digest()).decode()
    with_path = make_local("img_1.jpg", path=str(f))
    no_path = make_local("img_2.jpg")
    gone = make_local("img_3.jpg", path=str(tmp_path / "missing.jpg"))

    out = photos.attach_checksums([with_path, no_path, gone])
    assert out[0].checksum == expected
    assert out[1].checksum == "" and out[2].checksum == ""
    assert with_path.checksum == ""

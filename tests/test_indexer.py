import pytest

from immprune import indexer
from immprune.assets import RemoteAsset


def test_every_nonempty_checksum_is_indexed(make_remote):
    remote = [
        make_remote("a.jpg", checksum="c1"),
        make_remote("b.jpg", checksum=""),
        make_remote("c.jpg", checksum="c3"),
    ]
    idx = indexer.build_index(remote)
    # the matcher ignores checksums by default; they are still collected
    assert idx.checksums == {"c1", "c3"}
    assert "" not in idx.checksums


def test_strict_key_uses_exif_size_when_primary_is_zero(make_remote):
    idx = indexer.build_index([make_remote("A.JPG", size=0, exif_size=2048)])
    assert idx.has_strict("a.jpg|2048|2021-05-01 10:00:00")
    assert not idx.has_strict("a.jpg|0|2021-05-01 10:00:00")


def test_primary_size_wins_over_exif_size(make_remote):
    idx = indexer.build_index([make_remote("a.jpg", size=10, exif_size=2048)])
    assert idx.has_strict("a.jpg|10|2021-05-01 10:00:00")


def test_fallback_counts_track_duplicates(make_remote):
    idx = indexer.build_index(
        [
            make_remote("dup.jpg", size=1, checksum="x"),
            make_remote("DUP.jpg", size=2, checksum="y"),
            make_remote("solo.jpg"),
        ]
    )
    assert idx.fallback_count("dup.jpg|2021-05-01 10:00:00") == 2
    assert idx.fallback_count("solo.jpg|2021-05-01 10:00:00") == 1
    assert idx.fallback_count("missing.jpg|2021-05-01 10:00:00") == 0
    assert len(idx) == 3


def test_empty_remote_date_gives_empty_date_key(make_remote):
    idx = indexer.build_index([make_remote("nodate.jpg", date="")])
    assert idx.has_strict("nodate.jpg|1000|")
    assert idx.fallback_count("nodate.jpg|") == 1


def test_index_is_read_only(make_remote):
    idx = indexer.build_index([make_remote()])
    with pytest.raises(TypeError):
        idx.fallback_counts["x"] = 1
    with pytest.raises(AttributeError):
        idx.strict_keys.add("x")


def test_remote_asset_from_json_reads_nested_exif():
    a = RemoteAsset.from_json(
        {
            "originalFileName": "IMG.HEIC",
            "fileSizeInByte": None,
            "exifInfo": {"fileSizeInByte": 77},
            "dateTimeOriginal": "2020-01-01T00:00:00.000Z",
            "checksum": "abc=",
        }
    )
    assert a.effective_size == 77
    assert a.checksum == "abc="
    assert RemoteAsset.from_json({"originalFileName": "x", "exifInfo": None}).effective_size == 0

from datetime import datetime, timezone

import pytest

from immprune.assets import LocalAsset, RemoteAsset


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture()
def make_local():
    counter = {"n": 0}

    def _make(name="img.jpg", size=1000, date=utc(2021, 5, 1, 10), is_video=False, path="", uuid=None, checksum=""):
        counter["n"] += 1
        return LocalAsset(
            uuid=uuid or f"u{counter['n']}",
            filename=name.lower(),
            size=size,
            date=date,
            is_video=is_video,
            path=path,
            checksum=checksum,
        )

    return _make


@pytest.fixture()
def make_remote():
    def _make(name="img.jpg", size=1000, date="2021-05-01T10:00:00.000Z", checksum="", exif_size=0):
        return RemoteAsset(
            original_filename=name,
            size=size,
            exif_size=exif_size,
            date_time_original=date,
            checksum=checksum,
        )

    return _make

import io
import os
from dataclasses import replace

import pytest

from core.config import get_media_settings
from core.media import MediaUploader, remove_local_file, staged_file


def test_staged_file_is_removed_after_block(tmp_path):
    with staged_file(str(tmp_path / "up"), io.BytesIO(b"data"), "photo.PNG") as path:
        assert path.endswith(".png")
        with open(path, "rb") as fh:
            assert fh.read() == b"data"
    assert not os.path.exists(path)


def test_staged_file_is_removed_on_error(tmp_path):
    seen = {}
    with pytest.raises(RuntimeError):
        with staged_file(str(tmp_path), io.BytesIO(b"data"), "a.jpg") as path:
            seen["path"] = path
            raise RuntimeError("boom")
    assert not os.path.exists(seen["path"])


def test_staged_file_without_stream(tmp_path):
    with staged_file(str(tmp_path), None) as path:
        assert path is None


def test_staged_file_drops_odd_suffix(tmp_path):
    with staged_file(str(tmp_path), io.BytesIO(b"x"), "../../etc/passwd.$(rm)") as path:
        assert os.path.dirname(path) == str(tmp_path)
        assert os.path.splitext(path)[1] == ""


def test_upload_returns_url_and_removes_source(s3, make_file):
    uploader = MediaUploader(get_media_settings(), client=s3)
    path = make_file("avatar.png", b"img")
    result = uploader.upload(path)
    assert result.url == f"https://test-bucket.s3.us-east-1.amazonaws.com/{result.key}"
    assert s3.objects[result.key] == b"img"
    assert not os.path.exists(path)


def test_upload_failure_returns_none_and_removes_source(s3, make_file):
    s3.fail_uploads = 1
    uploader = MediaUploader(get_media_settings(), client=s3)
    path = make_file()
    assert uploader.upload(path) is None
    assert not os.path.exists(path)


def test_upload_without_path(s3):
    assert MediaUploader(get_media_settings(), client=s3).upload(None) is None
    assert s3.objects == {}


@pytest.mark.parametrize(
    "overrides,expected",
    [
        ({"public_url": "https://cdn.example/"}, "https://cdn.example/k.png"),
        ({"endpoint_url": "http://minio:9000"}, "http://minio:9000/test-bucket/k.png"),
        ({}, "https://test-bucket.s3.us-east-1.amazonaws.com/k.png"),
    ],
)
def test_get_url(overrides, expected):
    settings = replace(get_media_settings(), **overrides)
    assert MediaUploader(settings, client=object()).get_url("k.png") == expected


def test_delete_only_touches_own_objects(s3, make_file):
    uploader = MediaUploader(get_media_settings(), client=s3)
    result = uploader.upload(make_file())
    assert uploader.delete("https://elsewhere.example/x.png") is False
    assert uploader.delete(result.url) is True
    assert s3.deleted == [result.key]


def test_remove_local_file_is_idempotent(tmp_path):
    path = tmp_path / "gone.txt"
    remove_local_file(str(path))
    remove_local_file(None)
    assert not path.exists()

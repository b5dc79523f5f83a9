"""
Media upload to S3-compatible object storage, plus local staging of upload files.
"""
from __future__ import annotations

import logging
import os
import shutil
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional
from uuid import uuid4

import boto3

from core.config import MediaSettings

log = logging.getLogger("media")


@dataclass(frozen=True)
class UploadResult:
    url: str
    key: str


def remove_local_file(local_path: str | os.PathLike | None) -> None:
    if not local_path:
        return
    try:
        Path(local_path).unlink(missing_ok=True)
    except OSError:
        log.warning("could not remove temporary upload %s", local_path, exc_info=True)


def _safe_suffix(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower()
    if suffix and suffix[1:].isalnum() and len(suffix) <= 10:
        return suffix
    return ""


@contextmanager
def staged_file(
    upload_dir: str, stream: Optional[BinaryIO], filename: str | None = None
) -> Iterator[Optional[str]]:
    """
    Copy an incoming upload stream to a local temporary file and yield its path.
    The file is removed when the block exits, whatever happened inside it.
    Yields None when there is no stream (optional uploads).
    """
    if stream is None:
        yield None
        return
    Path(upload_dir).mkdir(parents=True, exist_ok=True)
    local_path = str(Path(upload_dir) / f"{uuid4().hex}{_safe_suffix(filename)}")
    try:
        with open(local_path, "wb") as out:
            shutil.copyfileobj(stream, out)
        yield local_path
    finally:
        remove_local_file(local_path)


class MediaUploader:
    """
    Uploads local files to a bucket and returns their public URL.
    upload() returns None on failure instead of raising; callers must branch on it.
    """

    def __init__(self, settings: MediaSettings, client=None):
        self._settings = settings
        self._client = client

    @property
    def upload_dir(self) -> str:
        return self._settings.upload_dir

    @property
    def client(self):
        if self._client is None:
            config = {"region_name": self._settings.region}
            if self._settings.endpoint_url:
                config["endpoint_url"] = self._settings.endpoint_url
            if self._settings.access_key:
                config["aws_access_key_id"] = self._settings.access_key
            if self._settings.secret_key:
                config["aws_secret_access_key"] = self._settings.secret_key
            self._client = boto3.client("s3", **config)
        return self._client

    def get_url(self, key: str) -> str:
        s = self._settings
        if s.public_url:
            return f"{s.public_url.rstrip('/')}/{key}"
        if s.endpoint_url:
            return f"{s.endpoint_url.rstrip('/')}/{s.bucket}/{key}"
        return f"https://{s.bucket}.s3.{s.region}.amazonaws.com/{key}"

    def upload(self, local_path: str | None) -> Optional[UploadResult]:
        if not local_path:
            return None
        key = f"uploads/{uuid4().hex}{_safe_suffix(local_path)}"
        try:
            self.client.upload_file(local_path, self._settings.bucket, key)
        except Exception:
            log.exception("media upload failed for %s", local_path)
            return None
        finally:
            remove_local_file(local_path)
        return UploadResult(url=self.get_url(key), key=key)

    def key_for_url(self, url: str) -> Optional[str]:
        prefix = self.get_url("")
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None

    def delete(self, url: str) -> bool:
        """Best-effort removal of a previously uploaded object."""
        key = self.key_for_url(url)
        if not key:
            return False
        try:
            self.client.delete_object(Bucket=self._settings.bucket, Key=key)
        except Exception:
            log.warning("could not delete media object %s", key, exc_info=True)
            return False
        return True


__all__ = ["UploadResult", "MediaUploader", "remove_local_file", "staged_file"]

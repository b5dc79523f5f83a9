import os

import pytest
from fastapi.testclient import TestClient

from core.auth_service import AuthService
from core.config import get_auth_settings, get_media_settings
from core.db.base import get_conn
from core.db.schema import init_db
from core.media import MediaUploader


class FakeS3Client:
    """Stands in for a boto3 S3 client; records what was uploaded and deleted."""

    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail_uploads = 0

    def upload_file(self, filename, bucket, key):
        if self.fail_uploads:
            self.fail_uploads -= 1
            raise RuntimeError("simulated upload failure")
        with open(filename, "rb") as fh:
            self.objects[key] = fh.read()

    def delete_object(self, Bucket, Key):
        self.deleted.append(Key)
        self.objects.pop(Key, None)


@pytest.fixture(autouse=True)
def _env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'accounts.db'}")
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "access-secret-for-tests-0123456789abcdef")
    monkeypatch.setenv("REFRESH_TOKEN_SECRET", "refresh-secret-for-tests-0123456789abcdef")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRY", "15m")
    monkeypatch.setenv("REFRESH_TOKEN_EXPIRY", "10d")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("MEDIA_BUCKET", "test-bucket")
    monkeypatch.setenv("UPLOAD_TMP_DIR", str(tmp_path / "uploads"))
    monkeypatch.delenv("MEDIA_PUBLIC_URL", raising=False)
    monkeypatch.delenv("MEDIA_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("COOKIE_SECURE", raising=False)
    monkeypatch.delenv("PUBLIC_BASE_URL", raising=False)
    init_db()
    yield


@pytest.fixture
def s3():
    return FakeS3Client()


@pytest.fixture
def service(s3):
    return AuthService(get_auth_settings(), MediaUploader(get_media_settings(), client=s3))


@pytest.fixture
def make_file(tmp_path):
    """Create a local file the way an upload would be staged."""
    counter = {"n": 0}

    def _make(name="avatar.png", content=b"\x89PNG fake image"):
        counter["n"] += 1
        path = tmp_path / f"{counter['n']}_{name}"
        path.write_bytes(content)
        return str(path)

    return _make


@pytest.fixture
def make_user(service, make_file):
    def _make(username="alice", email=None, password="Secret123", full_name=None):
        return service.register(
            username=username,
            email=email or f"{username}@x.com",
            password=password,
            full_name=full_name or username.title(),
            avatar_path=make_file(),
        )

    return _make


@pytest.fixture
def client(service):
    import app.api as api_module
    from app.auth_utils import get_auth_service

    api_module.app.dependency_overrides[get_auth_service] = lambda: service
    # Session cookies are Secure, so the jar only sends them back over https.
    yield TestClient(api_module.app, base_url="https://testserver")
    api_module.app.dependency_overrides.clear()


def count_rows(table: str) -> int:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(f"SELECT COUNT(*) AS count FROM {table}")
    count = int(cur.fetchone()["count"])
    conn.close()
    return count


@pytest.fixture
def count():
    return count_rows

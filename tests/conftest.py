import pytest

from strava_uploader import create_app

BASE_CONFIG = {
    "TESTING": True,
    "CLIENT_ID": "12345",
    "CLIENT_SECRET": "secret",
    "REFRESH_TOKEN": "refresh",
    "ACCESS_PIN": "4321",
    "UPLOAD_POLL_INTERVAL": 0,
    "RATELIMIT_ENABLED": False,
}


class FakeStrava:
    """Stands in for StravaClient; replays canned status responses."""

    def __init__(self, statuses=None, token="tok-abcd", upload_id=987, auth_error=None, upload_error=None):
        self.statuses = list(statuses or [])
        self.token = token
        self.upload_id = upload_id
        self.auth_error = auth_error
        self.upload_error = upload_error
        self.uploads = []
        self.polls = 0

    def refresh_access_token(self):
        if self.auth_error:
            raise self.auth_error
        return self.token

    def upload_file(self, access_token, file_path, filename, data_type, name):
        if self.upload_error:
            raise self.upload_error
        with open(file_path, "rb") as fh:
            content = fh.read()
        self.uploads.append({
            "token": access_token,
            "path": file_path,
            "filename": filename,
            "data_type": data_type,
            "name": name,
            "content": content,
        })
        return self.upload_id

    def get_upload_status(self, access_token, upload_id):
        self.polls += 1
        if self.statuses:
            return self.statuses.pop(0)
        return {"id": upload_id, "status": "Your activity is still being processed."}


@pytest.fixture
def app(tmp_path):
    app = create_app({**BASE_CONFIG, "UPLOAD_FOLDER": str(tmp_path / "uploads")})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_strava(app):
    fake = FakeStrava()
    app.extensions["strava"] = fake
    return fake

import io
import os

from strava_uploader.errors import UpstreamAuthError

def upload(client, name="Morning_Run.gpx", title="Easy run"):
    data = {"file": (io.BytesIO(b"<gpx></gpx>"), name)}
    if title is not None:
        data["title"] = title
    return client.post("/upload", data=data, content_type="multipart/form-data")

def test_liveness(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "Strava uploader backend is running!"

def test_client_shell_served(client):
    resp = client.get("/ui")
    assert resp.status_code == 200
    assert b"pin-form" in resp.data

def test_verify_pin_ok(client):
    resp = client.post("/verify-pin", json={"pin": "4321"})
    assert resp.status_code == 200
    assert resp.json == {"success": True}

def test_verify_pin_wrong_then_locked(client):
    first = client.post("/verify-pin", json={"pin": "0000"})
    assert first.status_code == 401
    assert first.json["error"] == "Wrong PIN. 2 tries left."
    second = client.post("/verify-pin", json={"pin": "0000"})
    assert second.json["error"] == "Wrong PIN. 1 tries left."
    third = client.post("/verify-pin", json={"pin": "0000"})
    assert third.status_code == 403
    assert third.json["error"] == "Locked out for 3 hours."
    again = client.post("/verify-pin", json={"pin": "4321"})
    assert again.status_code == 403

def test_verify_pin_keyed_by_forwarded_address(client):
    for _ in range(3):
        client.post("/verify-pin", json={"pin": "0000"}, headers={"X-Forwarded-For": "1.2.3.4, 10.0.0.1"})
    locked = client.post("/verify-pin", json={"pin": "4321"}, headers={"X-Forwarded-For": "1.2.3.4"})
    assert locked.status_code == 403
    other = client.post("/verify-pin", json={"pin": "4321"}, headers={"X-Forwarded-For": "5.6.7.8"})
    assert other.status_code == 200

def test_upload_missing_file(client, fake_strava):
    resp = client.post("/upload", data={"title": "x"})
    assert resp.status_code == 400

def test_upload_unsupported_type(client, fake_strava):
    resp = upload(client, name="notes.txt")
    assert resp.status_code == 400
    assert fake_strava.uploads == []

def test_upload_ok(client, app, fake_strava):
    fake_strava.statuses = [{"status": "Your activity is still being processed."}, {"activity_id": 321}]
    resp = upload(client)
    assert resp.status_code == 200
    assert resp.json == {"success": True, "activity_id": 321, "message": "Upload complete!"}
    sent = fake_strava.uploads[0]
    assert sent["name"] == "Easy run"
    assert sent["content"] == b"<gpx></gpx>"
    assert not os.path.exists(sent["path"])
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []

def test_upload_blank_title_uses_default(client, fake_strava):
    fake_strava.statuses = [{"activity_id": 1}]
    upload(client, title="   ")
    assert fake_strava.uploads[0]["name"] == "Uploaded from EnduranceARC T-Rex3"

def test_upload_processing_error(client, fake_strava):
    fake_strava.statuses = [{"error": "Garbage file"}]
    resp = upload(client)
    assert resp.status_code == 500
    assert resp.json == {"error": "Garbage file"}

def test_upload_timeout(client, app, fake_strava):
    app.config["UPLOAD_POLL_ATTEMPTS"] = 3
    resp = upload(client)
    assert resp.status_code == 504
    assert "Timeout" in resp.json["error"]
    assert fake_strava.polls == 3

def test_upload_auth_failure(client, app, fake_strava):
    fake_strava.auth_error = UpstreamAuthError("Token refresh failed: 401", payload={"message": "Authorization Error"})
    resp = upload(client)
    assert resp.status_code == 500
    assert resp.json == {"error": {"message": "Authorization Error"}}
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []

def test_refresh(client, fake_strava):
    resp = client.post("/refresh")
    assert resp.status_code == 200
    assert resp.json == {"success": True, "newAccessToken": "tok-abcd"}

def test_refresh_failure(client, fake_strava):
    fake_strava.auth_error = UpstreamAuthError("Token refresh failed: 400", payload={"message": "Bad Request"})
    resp = client.post("/refresh")
    assert resp.status_code == 500
    assert resp.json == {"error": {"message": "Bad Request"}}

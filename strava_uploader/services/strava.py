import logging

import requests

from ..errors import UpstreamAuthError, UpstreamProcessingError, UpstreamUploadError

logger = logging.getLogger(__name__)


def response_payload(response):
    """Body of an upstream response, parsed as JSON when possible."""
    try:
        return response.json()
    except ValueError:
        return response.text


class StravaClient:
    """
    Thin wrapper around the three Strava endpoints the relay needs:
    token refresh, upload, and upload status.

    Credentials are handed in once; access tokens are never kept on the
    instance, each caller asks for a fresh one.
    """

    def __init__(self, client_id, client_secret, refresh_token,
                 token_url="https://www.strava.com/oauth/token",
                 uploads_url="https://www.strava.com/api/v3/uploads",
                 timeout=30.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self._refresh_token = refresh_token
        self.token_url = token_url
        self.uploads_url = uploads_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            client_id=config["CLIENT_ID"],
            client_secret=config["CLIENT_SECRET"],
            refresh_token=config["REFRESH_TOKEN"],
            token_url=config.get("STRAVA_TOKEN_URL", "https://www.strava.com/oauth/token"),
            uploads_url=config.get("STRAVA_UPLOADS_URL", "https://www.strava.com/api/v3/uploads"),
            timeout=config.get("STRAVA_TIMEOUT", 30.0),
        )

    def refresh_access_token(self) -> str:
        """
        Exchange the stored refresh token for a short-lived access token.

        Raises:
            UpstreamAuthError: Strava rejected the exchange or could not be reached.
        """
        params = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "refresh_token",
            "refresh_token": self._refresh_token,
        }
        logger.info("Requesting new access token using refresh token")
        try:
            response = requests.post(self.token_url, data=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamAuthError(str(e)) from e

        payload = response_payload(response)
        if not response.ok or not isinstance(payload, dict) or "access_token" not in payload:
            logger.error(f"Token refresh failed: {response.status_code} {payload}")
            raise UpstreamAuthError(
                f"Token refresh failed: {response.status_code}",
                payload=payload,
                status=response.status_code,
            )

        access_token = payload["access_token"]
        logger.info(f"New access token generated (masked: ...{access_token[-4:]})")
        return access_token

    def upload_file(self, access_token, file_path, filename, data_type, name):
        """Send the activity file to Strava and return the upload id."""
        headers = {"Authorization": f"Bearer {access_token}"}
        data = {"data_type": data_type, "name": name}
        try:
            with open(file_path, "rb") as fh:
                response = requests.post(
                    self.uploads_url,
                    headers=headers,
                    files={"file": (filename, fh)},
                    data=data,
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise UpstreamUploadError(str(e)) from e

        payload = response_payload(response)
        if not response.ok or not isinstance(payload, dict) or payload.get("id") is None:
            logger.error(f"Failed to upload file: {response.status_code} {payload}")
            raise UpstreamUploadError(
                f"Upload failed: {response.status_code}",
                payload=payload,
                status=response.status_code,
            )
        logger.info(f"File uploaded successfully. Upload ID: {payload['id']}")
        return payload["id"]

    def get_upload_status(self, access_token, upload_id) -> dict:
        url = f"{self.uploads_url}/{upload_id}"
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamProcessingError(str(e)) from e

        payload = response_payload(response)
        if not response.ok or not isinstance(payload, dict):
            raise UpstreamProcessingError(
                f"Status check failed: {response.status_code}",
                payload=payload,
                status=response.status_code,
            )
        return payload

"""Errors raised by the relay and the HTTP status each one maps to.

Upstream errors keep whatever Strava sent back in ``payload`` so the route can
hand it to the client untouched.
"""


class RelayError(Exception):
    status_code = 500

    def __init__(self, message, payload=None, status=None):
        super().__init__(message)
        self.message = message
        self.payload = payload
        # Upstream HTTP status, when there was one
        self.status = status

    def to_dict(self):
        return {"error": self.payload if self.payload is not None else self.message}


class ConfigMissing(RelayError):
    def __init__(self, keys):
        super().__init__(
            "Missing required environment variables: " + ", ".join(keys)
        )
        self.keys = list(keys)


class UpstreamAuthError(RelayError):
    pass


class UpstreamUploadError(RelayError):
    pass


class UpstreamProcessingError(RelayError):
    pass


class ProcessingTimeout(RelayError):
    status_code = 504


class PollingCancelled(RelayError):
    status_code = 503


class UnsupportedFileType(RelayError):
    status_code = 400


class WrongPin(RelayError):
    status_code = 401

    def __init__(self, remaining):
        super().__init__(f"Wrong PIN. {remaining} tries left.")
        self.remaining = remaining


class Locked(RelayError):
    status_code = 403

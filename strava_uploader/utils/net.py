from flask import request
from flask_limiter.util import get_remote_address

def client_address() -> str:
    """Address the PIN lockout is keyed on: first X-Forwarded-For hop, else the peer."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or get_remote_address()

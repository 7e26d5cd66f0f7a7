from flask_limiter import Limiter

from .utils.net import client_address

# Initialized without app; will be bound in create_app.
# Default limits come from RATELIMIT_DEFAULT in app.config.
limiter = Limiter(key_func=client_address)

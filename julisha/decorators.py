import hmac
from functools import wraps

from flask import current_app, request

from julisha.errors import Unauthorized
from julisha.services.hashing import Hasher
from julisha.services.rate_limit import RateLimiter


def client_address() -> str:
    """Remote address of the caller (proxy-aware when TRUST_PROXY is set)."""
    return request.remote_addr or ""


def rate_limited(scope: str):
    """Decorator counting each call against the per-IP attempt window for *scope*."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            ip_hash = Hasher.from_config().ip_hash(client_address())
            RateLimiter.from_config().check_attempt(scope, ip_hash)
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_token_required(f):
    """Decorator to require the static admin bearer token."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get("ADMIN_TOKEN") or ""
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if (
            not expected
            or scheme.lower() != "bearer"
            or not hmac.compare_digest(token.strip().encode(), expected.encode())
        ):
            raise Unauthorized()
        return f(*args, **kwargs)
    return decorated_function

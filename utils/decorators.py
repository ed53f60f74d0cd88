from __future__ import annotations
from functools import wraps
from flask import request, g
from utils.security import ACCESS, decode_token
from models import storage, token_cache
from models.user import User
from services.exceptions import Unauthorized


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise Unauthorized("missing or invalid Authorization header")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("missing or invalid Authorization header")
    return token


def jwt_required():
    """
    Require a valid, non-blacklisted access token.
    Sets g.current_user, g.access_token and g.token_claims.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            decoded = decode_token(token, expected_type=ACCESS)
            if token_cache.is_blacklisted(token):
                raise Unauthorized("token has been revoked")

            user = storage.get(User, decoded.get("sub"))
            if not user:
                raise Unauthorized("user not found")
            g.current_user = user
            g.access_token = token
            g.token_claims = decoded
            return fn(*args, **kwargs)

        return wrapper

    return decorator

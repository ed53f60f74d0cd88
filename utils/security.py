"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access/refresh token pairs via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from flask import current_app

from services.exceptions import Unauthorized

ph = PasswordHasher()

ACCESS = "access"
REFRESH = "refresh"


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ttl(token_type: str) -> timedelta:
    key = "ACCESS_TOKEN_EXPIRES" if token_type == ACCESS else "REFRESH_TOKEN_EXPIRES"
    return current_app.config[key]


def create_token(subject: str, email: str, token_type: str) -> tuple[str, datetime]:
    exp = _now() + _ttl(token_type)
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "waste-space-api"),
        "sub": str(subject),
        "email": email,
        "iat": int(_now().timestamp()),
        "exp": int(exp.timestamp()),
        "type": token_type,
        "jti": generate_jti(),
    }
    token = jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=current_app.config["JWT_ALGORITHM"])
    return token, exp


def create_token_pair(subject: str, email: str) -> TokenPair:
    access, access_exp = create_token(subject, email, ACCESS)
    refresh, _ = create_token(subject, email, REFRESH)
    return TokenPair(access_token=access, refresh_token=refresh, expires_at=access_exp)


def decode_token(token: str, expected_type: str = ACCESS) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises Unauthorized on invalid signature,
    expiry or a token of the wrong type.
    """
    try:
        decoded = jwt.decode(
            token, current_app.config["JWT_SECRET"], algorithms=[current_app.config["JWT_ALGORITHM"]]
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("token has expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("invalid token")

    if decoded.get("type") != expected_type:
        raise Unauthorized("invalid token")
    return decoded


def remaining_lifetime(decoded: Dict[str, Any]) -> timedelta:
    """Time until the decoded token's exp claim."""
    exp = datetime.fromtimestamp(int(decoded.get("exp", 0)), tz=timezone.utc)
    return max(exp - _now(), timedelta(seconds=0))

"""
Accounts and authentication: registration, token issuance/refresh/logout,
profile maintenance and soft account deletion.
"""
from __future__ import annotations

import logging
from typing import Optional

from flask import current_app

from models import storage, token_cache
from models.base_model import utcnow
from models.user import User
from services.base import BaseService, parse_uuid
from services.exceptions import AlreadyExists, Forbidden, Unauthorized
from utils.security import (
    ACCESS,
    REFRESH,
    TokenPair,
    create_token,
    create_token_pair,
    decode_token,
    hash_password,
    remaining_lifetime,
    verify_password,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone_number", "date_of_birth", "address", "city", "state", "zip_code")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService(BaseService):

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        q = self.session.query(User).filter(User.email == email, User.alive())
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        return self.session.query(q.exists()).scalar()

    def get_by_email(self, email: str) -> Optional[User]:
        return (
            self.session.query(User)
            .filter(User.email == normalize_email(email), User.alive())
            .first()
        )

    def register(self, data: dict) -> User:
        email = normalize_email(data["email"])
        if self._email_taken(email):
            raise AlreadyExists("email already registered")

        user = User(
            email=email,
            password_hash=hash_password(data["password"]),
            **{k: data.get(k) for k in PROFILE_FIELDS},
        )
        storage.new(user)
        self._commit("create user", duplicate_message="email already registered")
        logger.info("user %s registered", user.id)
        return user

    def login(self, email: str, password: str) -> tuple[User, TokenPair]:
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise Unauthorized("invalid email or password")
        if not user.is_active:
            raise Forbidden("user account is inactive")

        tokens = create_token_pair(user.id, user.email)
        token_cache.set_refresh_token(user.id, tokens.refresh_token, current_app.config["REFRESH_TOKEN_EXPIRES"])

        user.last_login_at = utcnow()
        storage.new(user)
        self._commit("update last login")
        return user, tokens

    def refresh(self, refresh_token: str) -> str:
        claims = decode_token(refresh_token, expected_type=REFRESH)
        user_id = claims.get("sub")
        cached = token_cache.get_refresh_token(user_id)
        if cached is None:
            raise Unauthorized("refresh token expired or revoked")
        if cached != refresh_token:
            raise Unauthorized("invalid refresh token")
        access_token, _ = create_token(user_id, claims.get("email", ""), ACCESS)
        return access_token

    def logout(self, user_id: str, access_token: str, claims: dict) -> None:
        token_cache.blacklist_access_token(access_token, remaining_lifetime(claims))
        token_cache.delete_refresh_token(user_id)
        logger.info("user %s logged out", user_id)

    def get_by_id(self, user_id) -> User:
        return self._get_or_404(User, parse_uuid(user_id, "user"), "user")

    def update_me(self, user_id, data: dict) -> User:
        user = self.get_by_id(user_id)
        for key in PROFILE_FIELDS:
            if key not in data:
                continue
            if key == "phone_number" and data[key] != user.phone_number:
                user.is_phone_verified = False
            setattr(user, key, data[key])
        storage.new(user)
        self._commit("update user")
        return user

    def update_email(self, user_id, email: str) -> User:
        user = self.get_by_id(user_id)
        email = normalize_email(email)
        if self._email_taken(email, exclude_id=user.id):
            raise AlreadyExists("email already registered")
        user.email = email
        user.is_email_verified = False
        storage.new(user)
        self._commit("update email", duplicate_message="email already registered")
        return user

    def update_phone(self, user_id, phone_number: str) -> User:
        user = self.get_by_id(user_id)
        user.phone_number = phone_number
        user.is_phone_verified = False
        storage.new(user)
        self._commit("update phone")
        return user

    def update_password(self, user_id, current_password: str, new_password: str) -> None:
        user = self.get_by_id(user_id)
        if not verify_password(current_password, user.password_hash):
            raise Unauthorized("invalid current password")
        user.password_hash = hash_password(new_password)
        storage.new(user)
        self._commit("update password")

    def delete_me(self, user_id) -> None:
        user = self.get_by_id(user_id)
        user.soft_delete()
        self._commit("delete user")
        token_cache.delete_refresh_token(user.id)
        logger.info("user %s deleted", user.id)


user_service = UserService()

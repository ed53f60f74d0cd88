"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs signed with HS256)
- Keeps the current refresh token per user in redis so it can be revoked
- Blacklists access tokens in redis on logout until they expire
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g, current_app

from models.schemas.user import UserCreateSchema, UserOutSchema, UserLoginSchema, RefreshTokenSchema
from services.user_service import user_service
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
user_login_schema = UserLoginSchema()
refresh_token_schema = RefreshTokenSchema()


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [first_name, last_name, email, password, phone_number, date_of_birth, address, city, zip_code]
          properties:
            first_name: { type: string }
            last_name: { type: string }
            email: { type: string }
            password: { type: string }
            phone_number: { type: string, example: "+15551234567" }
            date_of_birth: { type: string, format: date }
            address: { type: string }
            city: { type: string }
            state: { type: string }
            zip_code: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    user = user_service.register(data)
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.post("/login")
def login():
    """
    Login: return the user with an access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Unauthorized
      403:
        description: Account inactive
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)
    user, tokens = user_service.login(data["email"], data["password"])
    return jsonify(
        {
            "data": {
                "user": user_out_schema.dump(user),
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token,
                "token_type": "bearer",
                "expires_in": int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()),
            }
        }
    ), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange the current refresh token for a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Invalid, expired or revoked refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_token_schema.load(payload)
    access_token = user_service.refresh(data["refresh_token"])
    return jsonify(
        {
            "data": {
                "access_token": access_token,
                "token_type": "bearer",
                "expires_in": int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()),
            }
        }
    ), 200


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the access token and the stored refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Unauthorized
    """
    user_service.logout(g.current_user.id, g.access_token, g.token_claims)
    return ("", 204)

from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.user import (
    UserEmailSchema,
    UserOutSchema,
    UserPasswordSchema,
    UserPhoneSchema,
    UserUpdateSchema,
)
from services.user_service import user_service
from utils.decorators import jwt_required

bp = Blueprint("users", __name__)

user_update_schema = UserUpdateSchema()
user_email_schema = UserEmailSchema()
user_phone_schema = UserPhoneSchema()
user_password_schema = UserPasswordSchema()
user_out_schema = UserOutSchema()


@bp.get("/users/me")
@jwt_required()
def get_me():
    """
    Get current user info
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": user_out_schema.dump(g.current_user)}), 200


@bp.put("/users/me")
@jwt_required()
def update_me():
    """
    Update the current user's profile (partial)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            first_name: { type: string }
            last_name: { type: string }
            phone_number: { type: string }
            date_of_birth: { type: string, format: date }
            address: { type: string }
            city: { type: string }
            state: { type: string }
            zip_code: { type: string }
    responses:
      200:
        description: Updated
      400:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)
    user = user_service.update_me(g.current_user.id, data)
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.delete("/users/me")
@jwt_required()
def delete_me():
    """
    Delete the current user's account (soft delete)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      204:
        description: Deleted
    """
    user_service.delete_me(g.current_user.id)
    return ("", 204)


@bp.patch("/users/me/email")
@jwt_required()
def update_email():
    """
    Change the current user's email; marks it unverified
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
    responses:
      200:
        description: Updated
      409:
        description: Email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = user_email_schema.load(payload)
    user = user_service.update_email(g.current_user.id, data["email"])
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.patch("/users/me/phone")
@jwt_required()
def update_phone():
    """
    Change the current user's phone number; marks it unverified
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            phone_number: { type: string }
    responses:
      200:
        description: Updated
    """
    payload = request.get_json(silent=True) or {}
    data = user_phone_schema.load(payload)
    user = user_service.update_phone(g.current_user.id, data["phone_number"])
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.patch("/users/me/password")
@jwt_required()
def update_password():
    """
    Change the current user's password
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            current_password: { type: string }
            new_password: { type: string }
    responses:
      204:
        description: Updated
      401:
        description: Invalid current password
    """
    payload = request.get_json(silent=True) or {}
    data = user_password_schema.load(payload)
    user_service.update_password(g.current_user.id, data["current_password"], data["new_password"])
    return ("", 204)


@bp.get("/users/<user_id>")
@jwt_required()
def get_user(user_id: str):
    """
    Get a user by id
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200:
        description: OK
      404:
        description: Not found
    """
    user = user_service.get_by_id(user_id)
    return jsonify({"data": user_out_schema.dump(user)}), 200

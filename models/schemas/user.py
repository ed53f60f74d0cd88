from marshmallow import Schema, fields, pre_load, validate, ValidationError

from models.schemas.common import (
    name_length,
    normalize_email,
    state_code,
    validate_e164,
    validate_not_future,
    validate_numeric,
)


def _validate_password(value):
    if len(value) < 8:
        raise ValidationError("Password must be at least 8 characters long.")
    if len(value) > 72:
        raise ValidationError("Password must be at most 72 characters long.")


class UserCreateSchema(Schema):
    first_name = fields.String(required=True, validate=name_length)
    last_name = fields.String(required=True, validate=name_length)
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=_validate_password)
    phone_number = fields.String(required=True, validate=validate_e164)
    date_of_birth = fields.Date(required=True, validate=validate_not_future)
    address = fields.String(required=True, validate=validate.Length(min=1))
    city = fields.String(required=True, validate=validate.Length(min=1))
    state = fields.String(allow_none=True, validate=state_code)
    zip_code = fields.String(required=True, validate=validate_numeric)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=normalize_email(data["email"]))
        return data


class UserUpdateSchema(Schema):
    first_name = fields.String(validate=name_length)
    last_name = fields.String(validate=name_length)
    phone_number = fields.String(validate=validate_e164)
    date_of_birth = fields.Date(validate=validate_not_future)
    address = fields.String()
    city = fields.String()
    state = fields.String(validate=state_code)
    zip_code = fields.String(validate=validate_numeric)


class UserEmailSchema(Schema):
    email = fields.Email(required=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=normalize_email(data["email"]))
        return data


class UserPhoneSchema(Schema):
    phone_number = fields.String(required=True, validate=validate_e164)


class UserPasswordSchema(Schema):
    current_password = fields.String(required=True, load_only=True)
    new_password = fields.String(required=True, load_only=True, validate=_validate_password)


class UserLoginSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String()
    first_name = fields.String()
    last_name = fields.String()
    email = fields.String()
    phone_number = fields.String()
    date_of_birth = fields.Date()
    address = fields.String()
    city = fields.String()
    state = fields.String(allow_none=True)
    zip_code = fields.String()
    is_email_verified = fields.Boolean()
    is_phone_verified = fields.Boolean()
    is_active = fields.Boolean()
    last_login_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

import re
from datetime import date

from marshmallow import ValidationError, validate

E164_RE = re.compile(r"^\+[1-9]\d{1,14}$")


def normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


def validate_e164(value: str) -> None:
    if not E164_RE.match(value or ""):
        raise ValidationError("Phone number must be in E.164 format, e.g. +15551234567.")


def validate_numeric(value: str) -> None:
    if not (value or "").isdigit():
        raise ValidationError("Must contain digits only.")


def validate_not_future(d: date) -> None:
    if d and d > date.today():
        raise ValidationError("Date cannot be in the future.")


name_length = validate.Length(min=2, max=100)
state_code = validate.Length(equal=2)
latitude_range = validate.Range(min=-90, max=90)
longitude_range = validate.Range(min=-180, max=180)
positive_price = validate.Range(min=0, min_inclusive=False)

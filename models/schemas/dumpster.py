from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from models.dumpster import DumpsterSize
from models.schemas.common import latitude_range, longitude_range, positive_price
from services.base import to_naive_utc

SIZES = [s.value for s in DumpsterSize]


class DumpsterCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=5, max=255))
    description = fields.String(allow_none=True)
    location = fields.String(required=True, validate=validate.Length(min=1, max=255))
    latitude = fields.Float(required=True, validate=latitude_range)
    longitude = fields.Float(required=True, validate=longitude_range)
    address = fields.String(required=True, validate=validate.Length(min=1))
    city = fields.String(required=True, validate=validate.Length(min=1))
    state = fields.String(required=True, validate=validate.Length(min=1))
    zip_code = fields.String(required=True, validate=validate.Length(min=1, max=10))
    price_per_day = fields.Float(required=True, validate=positive_price)
    size = fields.String(required=True, validate=validate.OneOf(SIZES))
    capacity = fields.String(allow_none=True)
    weight = fields.String(allow_none=True)


class DumpsterUpdateSchema(Schema):
    # All optional, but validate if present; rating/review_count are not accepted
    title = fields.String(validate=validate.Length(min=5, max=255))
    description = fields.String(allow_none=True)
    location = fields.String()
    latitude = fields.Float(validate=latitude_range)
    longitude = fields.Float(validate=longitude_range)
    address = fields.String()
    city = fields.String()
    state = fields.String()
    zip_code = fields.String(validate=validate.Length(max=10))
    price_per_day = fields.Float(validate=positive_price)
    size = fields.String(validate=validate.OneOf(SIZES))
    is_available = fields.Boolean()
    capacity = fields.String(allow_none=True)
    weight = fields.String(allow_none=True)


class DumpsterOutSchema(Schema):
    id = fields.String()
    owner_id = fields.String()
    title = fields.String()
    description = fields.String(allow_none=True)
    location = fields.String()
    latitude = fields.Float()
    longitude = fields.Float()
    address = fields.String()
    city = fields.String()
    state = fields.String()
    zip_code = fields.String()
    price_per_day = fields.Float()
    size = fields.Enum(DumpsterSize, by_value=True)
    is_available = fields.Boolean()
    rating = fields.Float()
    review_count = fields.Integer()
    capacity = fields.String(allow_none=True)
    weight = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class NearbyDumpsterOutSchema(DumpsterOutSchema):
    """Dumps a services.dumpster_service.NearbyDumpster: the dumpster plus its distance in km."""
    distance = fields.Float()

    def get_attribute(self, obj, attr, default):
        if attr == "distance":
            return obj.distance
        return super().get_attribute(obj.dumpster, attr, default)


class BookingSchema(Schema):
    start_date = fields.DateTime(required=True)
    end_date = fields.DateTime(required=True)

    @validates_schema
    def _end_after_start(self, data, **kwargs):
        start, end = data.get("start_date"), data.get("end_date")
        if start and end and to_naive_utc(end) <= to_naive_utc(start):
            raise ValidationError("end_date must be after start_date.", "end_date")


class BookingOutSchema(Schema):
    id = fields.String()
    dumpster_id = fields.String()
    user_id = fields.String()
    start_date = fields.DateTime()
    end_date = fields.DateTime()
    total_price = fields.Float()
    status = fields.String()
    created_at = fields.DateTime()


class AvailabilityOutSchema(Schema):
    dumpster_id = fields.String()
    is_available = fields.Boolean()
    message = fields.String()

from marshmallow import Schema, fields, validate

rating_range = validate.Range(min=1, max=5)


class ReviewCreateSchema(Schema):
    rating = fields.Integer(required=True, strict=True, validate=rating_range)
    comment = fields.String(allow_none=True, validate=validate.Length(max=1000))


class ReviewUpdateSchema(Schema):
    rating = fields.Integer(strict=True, validate=rating_range)
    comment = fields.String(allow_none=True, validate=validate.Length(max=1000))


class ReviewOutSchema(Schema):
    id = fields.String()
    dumpster_id = fields.String()
    user_id = fields.String()
    rating = fields.Integer()
    comment = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

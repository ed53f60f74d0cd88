from marshmallow import Schema, fields

from models.usage import UsageStatus


class UsageStartSchema(Schema):
    start_time = fields.DateTime(required=True)
    notes = fields.String(allow_none=True)


class UsageEndSchema(Schema):
    end_time = fields.DateTime(required=True)
    notes = fields.String(allow_none=True)


class UsageOutSchema(Schema):
    id = fields.String()
    dumpster_id = fields.String()
    user_id = fields.String()
    start_time = fields.DateTime()
    end_time = fields.DateTime(allow_none=True)
    duration_minutes = fields.Integer(allow_none=True)
    total_cost = fields.Float(allow_none=True)
    status = fields.Enum(UsageStatus, by_value=True)
    notes = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class UsageStatsOutSchema(Schema):
    total_usages = fields.Integer()
    active_usages = fields.Integer()
    completed_usages = fields.Integer()
    total_minutes = fields.Integer()
    total_revenue = fields.Float()

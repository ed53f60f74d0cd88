from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.usage import UsageEndSchema, UsageOutSchema, UsageStartSchema, UsageStatsOutSchema
from services.usage_service import usage_service
from utils.decorators import jwt_required
from api.utils.params import parse_pagination

bp = Blueprint("usages", __name__)

usage_start_schema = UsageStartSchema()
usage_end_schema = UsageEndSchema()
usage_out_schema = UsageOutSchema()
usages_out_schema = UsageOutSchema(many=True)
usage_stats_out_schema = UsageStatsOutSchema()


def _page_response(result):
    return jsonify({"data": usages_out_schema.dump(result.items), "meta": result.meta()}), 200


@bp.post("/dumpsters/<dumpster_id>/usages/start")
@jwt_required()
def start_usage(dumpster_id: str):
    """
    Start a usage session on a dumpster
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          required: [start_time]
          properties:
            start_time: { type: string, format: date-time }
            notes: { type: string }
    responses:
      201:
        description: Session started
      400:
        description: Dumpster unavailable or a session is already active
      404:
        description: Dumpster not found
    """
    payload = request.get_json(silent=True) or {}
    data = usage_start_schema.load(payload)
    usage = usage_service.start_usage(g.current_user.id, dumpster_id, data["start_time"], data.get("notes"))
    return jsonify({"data": usage_out_schema.dump(usage)}), 201


@bp.put("/dumpsters/<dumpster_id>/usages/<usage_id>/end")
@jwt_required()
def end_usage(dumpster_id: str, usage_id: str):
    """
    End an active usage session and bill it
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - { in: path, name: usage_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          required: [end_time]
          properties:
            end_time: { type: string, format: date-time }
            notes: { type: string }
    responses:
      200:
        description: Session completed
      400:
        description: Not active or end before start
      403:
        description: Not the session's user
    """
    payload = request.get_json(silent=True) or {}
    data = usage_end_schema.load(payload)
    usage = usage_service.end_usage(g.current_user.id, usage_id, data["end_time"], data.get("notes"))
    return jsonify({"data": usage_out_schema.dump(usage)}), 200


@bp.get("/dumpsters/<dumpster_id>/usages")
@jwt_required()
def list_dumpster_usages(dumpster_id: str):
    """
    Usage sessions of a dumpster
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - { in: query, name: status, type: string, required: false, enum: [active, completed, cancelled] }
      - { in: query, name: page, type: integer, required: false, default: 1 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
    responses:
      200:
        description: OK
    """
    page, limit = parse_pagination()
    result = usage_service.list_by_dumpster(dumpster_id, page=page, limit=limit, status=request.args.get("status"))
    return _page_response(result)


@bp.get("/usages")
@jwt_required()
def list_usages():
    """
    Usage sessions, optionally filtered
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: query, name: status, type: string, required: false }
      - { in: query, name: dumpster_id, type: string, required: false }
      - { in: query, name: user_id, type: string, required: false }
      - { in: query, name: page, type: integer, required: false, default: 1 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
    responses:
      200:
        description: OK
    """
    page, limit = parse_pagination()
    result = usage_service.list(
        page=page,
        limit=limit,
        status=request.args.get("status"),
        dumpster_id=request.args.get("dumpster_id"),
        user_id=request.args.get("user_id"),
    )
    return _page_response(result)


@bp.get("/usages/stats")
@jwt_required()
def usage_stats():
    """
    Aggregate usage counts, minutes and revenue
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: query, name: dumpster_id, type: string, required: false }
      - { in: query, name: user_id, type: string, required: false }
    responses:
      200:
        description: OK
    """
    stats = usage_service.get_stats(
        dumpster_id=request.args.get("dumpster_id"),
        user_id=request.args.get("user_id"),
    )
    return jsonify({"data": usage_stats_out_schema.dump(stats)}), 200


@bp.get("/usages/user/<user_id>")
@jwt_required()
def list_user_usages(user_id: str):
    """
    Usage sessions of a user
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
      - { in: query, name: status, type: string, required: false }
      - { in: query, name: page, type: integer, required: false, default: 1 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
    responses:
      200:
        description: OK
    """
    page, limit = parse_pagination()
    result = usage_service.list_by_user(user_id, page=page, limit=limit, status=request.args.get("status"))
    return _page_response(result)


@bp.get("/usages/<usage_id>")
@jwt_required()
def get_usage(usage_id: str):
    """
    Get a usage session by id
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: usage_id, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: Not found
    """
    usage = usage_service.get_by_id(usage_id)
    return jsonify({"data": usage_out_schema.dump(usage)}), 200


@bp.delete("/usages/<usage_id>")
@jwt_required()
def delete_usage(usage_id: str):
    """
    Delete a usage session (soft delete)
    ---
    tags:
      - Usages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: usage_id, type: string, required: true }
    responses:
      204:
        description: Deleted
    """
    usage_service.delete(usage_id)
    return ("", 204)

from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.dumpster import (
    AvailabilityOutSchema,
    BookingOutSchema,
    BookingSchema,
    DumpsterCreateSchema,
    DumpsterOutSchema,
    DumpsterUpdateSchema,
    NearbyDumpsterOutSchema,
)
from services.dumpster_service import NearbyDumpster, dumpster_service
from services.geo import LATITUDE_BOUNDS, LONGITUDE_BOUNDS
from utils.decorators import jwt_required
from api.utils.params import parse_bool_arg, parse_float_arg, parse_int_arg, parse_pagination

bp = Blueprint("dumpsters", __name__)

dumpster_create_schema = DumpsterCreateSchema()
dumpster_update_schema = DumpsterUpdateSchema()
dumpster_out_schema = DumpsterOutSchema()
dumpsters_out_schema = DumpsterOutSchema(many=True)
nearby_out_schema = NearbyDumpsterOutSchema(many=True)
booking_schema = BookingSchema()
booking_out_schema = BookingOutSchema()
availability_out_schema = AvailabilityOutSchema()


def _dump_items(items):
    if items and isinstance(items[0], NearbyDumpster):
        return nearby_out_schema.dump(items)
    return dumpsters_out_schema.dump(items)


@bp.get("/dumpsters")
def list_dumpsters():
    """
    List dumpsters with filters, sorting and pagination
    ---
    tags:
      - Dumpsters
    parameters:
      - { in: query, name: page, type: integer, required: false, default: 1 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
      - { in: query, name: sort_by, type: string, required: false, enum: [price, rating, availability] }
      - { in: query, name: location, type: string, required: false, description: "lat,lng; switches to nearby search" }
      - { in: query, name: max_price, type: number, required: false }
      - { in: query, name: size, type: string, required: false, enum: [small, medium, large, extraLarge] }
      - { in: query, name: available_now, type: boolean, required: false }
      - { in: query, name: max_distance, type: number, required: false }
    responses:
      200:
        description: OK
    """
    page, limit = parse_pagination()
    result = dumpster_service.list(
        page=page,
        limit=limit,
        sort_by=request.args.get("sort_by"),
        location=request.args.get("location"),
        max_price=parse_float_arg("max_price"),
        size=request.args.get("size"),
        available_now=parse_bool_arg("available_now"),
        max_distance=parse_float_arg("max_distance"),
    )
    return jsonify({"data": _dump_items(result.items), "meta": result.meta()}), 200


@bp.get("/dumpsters/search")
def search_dumpsters():
    """
    Keyword and attribute search
    ---
    tags:
      - Dumpsters
    parameters:
      - { in: query, name: q, type: string, required: false }
      - { in: query, name: city, type: string, required: false }
      - { in: query, name: state, type: string, required: false }
      - { in: query, name: zip_code, type: string, required: false }
      - { in: query, name: min_price, type: number, required: false }
      - { in: query, name: max_price, type: number, required: false }
      - { in: query, name: size, type: string, required: false }
      - { in: query, name: is_available, type: boolean, required: false }
      - { in: query, name: page, type: integer, required: false, default: 1 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
    responses:
      200:
        description: OK
    """
    page, limit = parse_pagination()
    result = dumpster_service.search(
        query_text=request.args.get("q"),
        city=request.args.get("city"),
        state=request.args.get("state"),
        zip_code=request.args.get("zip_code"),
        min_price=parse_float_arg("min_price"),
        max_price=parse_float_arg("max_price"),
        size=request.args.get("size"),
        is_available=parse_bool_arg("is_available"),
        page=page,
        limit=limit,
    )
    return jsonify({"data": dumpsters_out_schema.dump(result.items), "meta": result.meta()}), 200


@bp.get("/dumpsters/nearby")
def nearby_dumpsters():
    """
    Dumpsters within max_distance km of a point, closest first
    ---
    tags:
      - Dumpsters
    parameters:
      - { in: query, name: lat, type: number, required: true }
      - { in: query, name: lng, type: number, required: true }
      - { in: query, name: max_distance, type: number, required: false, default: 25 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
    responses:
      200:
        description: OK
      400:
        description: Missing or invalid coordinates
    """
    hits = dumpster_service.find_nearby(
        parse_float_arg("lat", required=True, bounds=LATITUDE_BOUNDS),
        parse_float_arg("lng", required=True, bounds=LONGITUDE_BOUNDS),
        max_distance_km=parse_float_arg("max_distance"),
        limit=parse_int_arg("limit", 0),
    )
    return jsonify({"data": nearby_out_schema.dump(hits)}), 200


@bp.get("/dumpsters/<dumpster_id>")
def get_dumpster(dumpster_id: str):
    """
    Get a dumpster by id
    ---
    tags:
      - Dumpsters
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: Not found
    """
    dumpster = dumpster_service.get_by_id(dumpster_id)
    return jsonify({"data": dumpster_out_schema.dump(dumpster)}), 200


@bp.get("/dumpsters/<dumpster_id>/availability")
def check_availability(dumpster_id: str):
    """
    Whether a dumpster is currently available
    ---
    tags:
      - Dumpsters
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
    responses:
      200:
        description: OK
    """
    availability = dumpster_service.check_availability(dumpster_id)
    return jsonify({"data": availability_out_schema.dump(availability)}), 200


@bp.post("/dumpsters")
@jwt_required()
def create_dumpster():
    """
    Create a dumpster listing owned by the current user
    ---
    tags:
      - Dumpsters
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [title, location, latitude, longitude, address, city, state, zip_code, price_per_day, size]
          properties:
            title: { type: string }
            description: { type: string }
            location: { type: string }
            latitude: { type: number }
            longitude: { type: number }
            address: { type: string }
            city: { type: string }
            state: { type: string }
            zip_code: { type: string }
            price_per_day: { type: number }
            size: { type: string, enum: [small, medium, large, extraLarge] }
            capacity: { type: string }
            weight: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = dumpster_create_schema.load(payload)
    dumpster = dumpster_service.create(g.current_user.id, data)
    return jsonify({"data": dumpster_out_schema.dump(dumpster)}), 201


@bp.put("/dumpsters/<dumpster_id>")
@jwt_required()
def update_dumpster(dumpster_id: str):
    """
    Update a dumpster (owner only, partial)
    ---
    tags:
      - Dumpsters
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not the owner
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = dumpster_update_schema.load(payload)
    dumpster = dumpster_service.update(g.current_user.id, dumpster_id, data)
    return jsonify({"data": dumpster_out_schema.dump(dumpster)}), 200


@bp.delete("/dumpsters/<dumpster_id>")
@jwt_required()
def delete_dumpster(dumpster_id: str):
    """
    Delete a dumpster (owner only, soft delete)
    ---
    tags:
      - Dumpsters
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
    responses:
      204:
        description: Deleted
      403:
        description: Not the owner
    """
    dumpster_service.delete(g.current_user.id, dumpster_id)
    return ("", 204)


@bp.post("/dumpsters/<dumpster_id>/book")
@jwt_required()
def book_dumpster(dumpster_id: str):
    """
    Price a rental window for a dumpster (nothing is reserved)
    ---
    tags:
      - Dumpsters
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            start_date: { type: string, format: date-time }
            end_date: { type: string, format: date-time }
    responses:
      201:
        description: Booking quote
      400:
        description: Unavailable dumpster or invalid window
    """
    payload = request.get_json(silent=True) or {}
    data = booking_schema.load(payload)
    booking = dumpster_service.book(g.current_user.id, dumpster_id, data["start_date"], data["end_date"])
    return jsonify({"data": booking_out_schema.dump(booking)}), 201

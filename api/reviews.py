from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models.schemas.review import ReviewCreateSchema, ReviewOutSchema, ReviewUpdateSchema
from services.review_service import review_service
from utils.decorators import jwt_required
from api.utils.params import parse_pagination

bp = Blueprint("reviews", __name__)

review_create_schema = ReviewCreateSchema()
review_update_schema = ReviewUpdateSchema()
review_out_schema = ReviewOutSchema()
reviews_out_schema = ReviewOutSchema(many=True)


@bp.get("/dumpsters/<dumpster_id>/reviews")
def list_dumpster_reviews(dumpster_id: str):
    """
    Reviews of a dumpster, newest first
    ---
    tags:
      - Reviews
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - { in: query, name: page, type: integer, required: false, default: 1 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
    responses:
      200:
        description: OK
    """
    page, limit = parse_pagination()
    result = review_service.list_by_dumpster(dumpster_id, page=page, limit=limit)
    return jsonify({"data": reviews_out_schema.dump(result.items), "meta": result.meta()}), 200


@bp.get("/reviews/<review_id>")
def get_review(review_id: str):
    """
    Get a review by id
    ---
    tags:
      - Reviews
    parameters:
      - { in: path, name: review_id, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: Not found
    """
    review = review_service.get_by_id(review_id)
    return jsonify({"data": review_out_schema.dump(review)}), 200


@bp.get("/reviews/user/<user_id>")
@jwt_required()
def list_user_reviews(user_id: str):
    """
    Reviews written by a user
    ---
    tags:
      - Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
      - { in: query, name: page, type: integer, required: false, default: 1 }
      - { in: query, name: limit, type: integer, required: false, default: 20 }
    responses:
      200:
        description: OK
    """
    page, limit = parse_pagination()
    result = review_service.list_by_user(user_id, page=page, limit=limit)
    return jsonify({"data": reviews_out_schema.dump(result.items), "meta": result.meta()}), 200


@bp.post("/dumpsters/<dumpster_id>/reviews")
@jwt_required()
def create_review(dumpster_id: str):
    """
    Review a dumpster (one review per user and dumpster)
    ---
    tags:
      - Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          required: [rating]
          properties:
            rating: { type: integer, minimum: 1, maximum: 5 }
            comment: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error or already reviewed
      404:
        description: Dumpster not found
    """
    payload = request.get_json(silent=True) or {}
    data = review_create_schema.load(payload)
    review = review_service.create(g.current_user.id, dumpster_id, data["rating"], data.get("comment"))
    return jsonify({"data": review_out_schema.dump(review)}), 201


@bp.put("/dumpsters/<dumpster_id>/reviews/<review_id>")
@jwt_required()
def update_review(dumpster_id: str, review_id: str):
    """
    Update own review (partial)
    ---
    tags:
      - Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - { in: path, name: review_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            rating: { type: integer, minimum: 1, maximum: 5 }
            comment: { type: string }
    responses:
      200:
        description: Updated
      403:
        description: Not the author
    """
    payload = request.get_json(silent=True) or {}
    data = review_update_schema.load(payload)
    review = review_service.update(g.current_user.id, review_id, **data)
    return jsonify({"data": review_out_schema.dump(review)}), 200


@bp.delete("/dumpsters/<dumpster_id>/reviews/<review_id>")
@jwt_required()
def delete_review(dumpster_id: str, review_id: str):
    """
    Delete own review (soft delete)
    ---
    tags:
      - Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dumpster_id, type: string, required: true }
      - { in: path, name: review_id, type: string, required: true }
    responses:
      204:
        description: Deleted
      403:
        description: Not the author
    """
    review_service.delete(g.current_user.id, review_id)
    return ("", 204)

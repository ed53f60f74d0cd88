from flask import Blueprint

from models import storage, token_cache

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API and its backing services are up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            version:
              type: string
              example: 1.0.0
            database:
              type: string
              example: ok
            cache:
              type: string
              example: ok
      503:
        description: A backing service is down
    """
    database = "ok" if storage.ping() else "unavailable"
    cache = "ok" if token_cache.ping() else "unavailable"
    healthy = database == "ok" and cache == "ok"
    body = {
        "status": "ok" if healthy else "degraded",
        "version": "1.0.0",
        "database": database,
        "cache": cache,
    }
    return body, 200 if healthy else 503

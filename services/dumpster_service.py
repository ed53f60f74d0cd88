"""
Dumpster listings: owner CRUD, filtered listing, keyword search, nearby search,
availability and booking quotes.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_

from models import storage
from models.base_model import utcnow
from models.dumpster import Dumpster, DumpsterSize
from services.base import BaseService, parse_uuid, to_naive_utc
from services.exceptions import BadRequest, Forbidden
from services.geo import distance_km, parse_location
from services.pagination import DEFAULT_LIMIT, Page, normalize_page, paginate

logger = logging.getLogger(__name__)

DEFAULT_NEARBY_DISTANCE_KM = 25.0

# Owner-editable columns; rating/review_count belong to the review aggregate
EDITABLE_FIELDS = (
    "title",
    "description",
    "location",
    "latitude",
    "longitude",
    "address",
    "city",
    "state",
    "zip_code",
    "price_per_day",
    "size",
    "is_available",
    "capacity",
    "weight",
)

SORT_ORDERS = {
    "price": (Dumpster.price_per_day.asc(),),
    "rating": (Dumpster.rating.desc(),),
    "availability": (Dumpster.is_available.desc(), Dumpster.created_at.desc()),
}
DEFAULT_ORDER = (Dumpster.created_at.desc(),)


@dataclass
class NearbyDumpster:
    dumpster: Dumpster
    distance: float


def parse_size(raw: Optional[str]) -> Optional[DumpsterSize]:
    if not raw:
        return None
    try:
        return DumpsterSize(raw)
    except ValueError:
        allowed = [s.value for s in DumpsterSize]
        raise BadRequest(f"size must be one of {allowed}")


class DumpsterService(BaseService):

    # --- listing management -------------------------------------------------

    def create(self, owner_id, data: dict) -> Dumpster:
        owner_id = parse_uuid(owner_id, "owner")
        fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        if "size" in fields:
            fields["size"] = parse_size(fields["size"])
        dumpster = Dumpster(owner_id=owner_id, rating=0.0, review_count=0, **fields)
        storage.new(dumpster)
        self._commit("create dumpster")
        logger.info("dumpster %s created by %s", dumpster.id, owner_id)
        return dumpster

    def get_by_id(self, dumpster_id) -> Dumpster:
        return self._get_or_404(Dumpster, parse_uuid(dumpster_id, "dumpster"), "dumpster")

    def _owned(self, owner_id, dumpster_id, verb: str) -> Dumpster:
        dumpster_id = parse_uuid(dumpster_id, "dumpster")
        owner_id = parse_uuid(owner_id, "owner")
        dumpster = self._get_or_404(Dumpster, dumpster_id, "dumpster")
        if dumpster.owner_id != owner_id:
            raise Forbidden(f"you don't have permission to {verb} this dumpster")
        return dumpster

    def update(self, owner_id, dumpster_id, data: dict) -> Dumpster:
        dumpster = self._owned(owner_id, dumpster_id, "update")
        for key, value in data.items():
            if key not in EDITABLE_FIELDS:
                continue
            if key == "size":
                value = parse_size(value)
            setattr(dumpster, key, value)
        storage.new(dumpster)
        self._commit("update dumpster")
        return dumpster

    def delete(self, owner_id, dumpster_id) -> None:
        dumpster = self._owned(owner_id, dumpster_id, "delete")
        dumpster.soft_delete()
        self._commit("delete dumpster")
        logger.info("dumpster %s deleted", dumpster.id)

    # --- queries ------------------------------------------------------------

    def _alive(self):
        return self.session.query(Dumpster).filter(Dumpster.alive())

    def list(
        self,
        page=1,
        limit=DEFAULT_LIMIT,
        sort_by: Optional[str] = None,
        location: Optional[str] = None,
        max_price: Optional[float] = None,
        size: Optional[str] = None,
        available_now: Optional[bool] = None,
        max_distance: Optional[float] = None,
    ) -> Page:
        coords = parse_location(location) if location else None
        if coords is not None:
            hits = self.find_nearby(coords[0], coords[1], max_distance, limit)
            # nearby results are not paged; they always form page 1
            _, limit = normalize_page(1, limit)
            return Page(items=hits, total=len(hits), page=1, limit=limit)

        query = self._alive()
        if max_price is not None:
            query = query.filter(Dumpster.price_per_day <= max_price)
        size = parse_size(size)
        if size is not None:
            query = query.filter(Dumpster.size == size)
        if available_now:
            query = query.filter(Dumpster.is_available.is_(True))

        order_by = SORT_ORDERS.get(sort_by or "", DEFAULT_ORDER)
        return paginate(query, order_by, page, limit)

    def search(
        self,
        query_text: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        zip_code: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        size: Optional[str] = None,
        is_available: Optional[bool] = None,
        page=1,
        limit=DEFAULT_LIMIT,
    ) -> Page:
        query = self._alive()
        if query_text:
            pattern = f"%{query_text.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(Dumpster.title).like(pattern),
                    func.lower(Dumpster.description).like(pattern),
                    func.lower(Dumpster.location).like(pattern),
                )
            )
        if city:
            query = query.filter(func.lower(Dumpster.city).like(f"%{city.strip().lower()}%"))
        if state:
            query = query.filter(Dumpster.state == state)
        if zip_code:
            query = query.filter(Dumpster.zip_code == zip_code)
        if min_price is not None:
            query = query.filter(Dumpster.price_per_day >= min_price)
        if max_price is not None:
            query = query.filter(Dumpster.price_per_day <= max_price)
        size = parse_size(size)
        if size is not None:
            query = query.filter(Dumpster.size == size)
        if is_available is not None:
            query = query.filter(Dumpster.is_available.is_(bool(is_available)))

        return paginate(query, DEFAULT_ORDER, page, limit)

    def find_nearby(
        self,
        lat: float,
        lng: float,
        max_distance_km: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[NearbyDumpster]:
        """Dumpsters strictly within max_distance_km of (lat, lng), closest first."""
        if max_distance_km is None:
            max_distance_km = DEFAULT_NEARBY_DISTANCE_KM
        _, limit = normalize_page(1, limit)

        hits = []
        for dumpster in self._alive().all():
            distance = distance_km(lat, lng, dumpster.latitude, dumpster.longitude)
            if distance < max_distance_km:
                hits.append(NearbyDumpster(dumpster=dumpster, distance=distance))
        hits.sort(key=lambda hit: hit.distance)
        return hits[:limit]

    def check_availability(self, dumpster_id) -> dict:
        dumpster = self.get_by_id(dumpster_id)
        return {
            "dumpster_id": dumpster.id,
            "is_available": dumpster.is_available,
            "message": "" if dumpster.is_available else "Dumpster is currently unavailable",
        }

    def book(self, user_id, dumpster_id, start_date: datetime, end_date: datetime) -> dict:
        """Price a rental window. Nothing is reserved or persisted."""
        user_id = parse_uuid(user_id, "user")
        dumpster = self.get_by_id(dumpster_id)
        if not dumpster.is_available:
            raise BadRequest("dumpster is not available")

        start_date = to_naive_utc(start_date)
        end_date = to_naive_utc(end_date)
        days = (end_date - start_date).total_seconds() / 86400
        if days <= 0:
            raise BadRequest("end date must be after start date")

        return {
            "id": str(uuid.uuid4()),
            "dumpster_id": dumpster.id,
            "user_id": user_id,
            "start_date": start_date,
            "end_date": end_date,
            "total_price": float(dumpster.price_per_day) * days,
            "status": "pending",
            "created_at": utcnow(),
        }


dumpster_service = DumpsterService()

"""
Usage session engine: start/end of a billable interval and its cost.

Exclusivity of active sessions per (user, dumpster) rests on the pre-check in
start_usage; there is no store constraint behind it, so two interleaved starts
can both succeed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, case

from models import storage
from models.dumpster import Dumpster
from models.usage import DumpsterUsage, UsageStatus
from services.base import BaseService, parse_uuid, to_naive_utc
from services.exceptions import BadRequest, Forbidden
from services.pagination import Page, paginate

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def calculate_cost(price_per_day: float, duration_minutes: int) -> float:
    """Linear per-minute proration of the daily rate."""
    return (float(price_per_day) / MINUTES_PER_DAY) * duration_minutes


def parse_status(raw: Optional[str]) -> Optional[UsageStatus]:
    if not raw:
        return None
    try:
        return UsageStatus(raw)
    except ValueError:
        allowed = [s.value for s in UsageStatus]
        raise BadRequest(f"status must be one of {allowed}")


@dataclass
class UsageStats:
    total_usages: int = 0
    active_usages: int = 0
    completed_usages: int = 0
    total_minutes: int = 0
    total_revenue: float = 0.0


class UsageService(BaseService):

    def _active_session(self, user_id: str, dumpster_id: str) -> Optional[DumpsterUsage]:
        return (
            self.session.query(DumpsterUsage)
            .filter(
                DumpsterUsage.user_id == user_id,
                DumpsterUsage.dumpster_id == dumpster_id,
                DumpsterUsage.status == UsageStatus.ACTIVE,
                DumpsterUsage.alive(),
            )
            .first()
        )

    def start_usage(self, user_id, dumpster_id, start_time: datetime, notes: Optional[str] = None) -> DumpsterUsage:
        user_id = parse_uuid(user_id, "user")
        dumpster_id = parse_uuid(dumpster_id, "dumpster")

        dumpster = self._get_or_404(Dumpster, dumpster_id, "dumpster")
        if not dumpster.is_available:
            raise BadRequest("dumpster is not available")

        if self._active_session(user_id, dumpster_id) is not None:
            raise BadRequest("you already have an active usage session for this dumpster")

        usage = DumpsterUsage(
            user_id=user_id,
            dumpster_id=dumpster_id,
            start_time=to_naive_utc(start_time),
            status=UsageStatus.ACTIVE,
            notes=notes,
        )
        storage.new(usage)
        self._commit("create usage")
        logger.info("usage %s started: user=%s dumpster=%s", usage.id, user_id, dumpster_id)
        return usage

    def end_usage(self, user_id, usage_id, end_time: datetime, notes: Optional[str] = None) -> DumpsterUsage:
        usage_id = parse_uuid(usage_id, "usage")
        user_id = parse_uuid(user_id, "user")

        usage = self._get_or_404(DumpsterUsage, usage_id, "usage")
        if usage.user_id != user_id:
            raise Forbidden("you don't have permission to end this usage session")
        if usage.status != UsageStatus.ACTIVE:
            raise BadRequest("usage session is not active")

        end_time = to_naive_utc(end_time)
        if end_time <= usage.start_time:
            raise BadRequest("end time must be after start time")

        duration = int((end_time - usage.start_time).total_seconds() // 60)
        dumpster = self._get_or_404(Dumpster, usage.dumpster_id, "dumpster")

        usage.end_time = end_time
        usage.duration_minutes = duration
        usage.total_cost = calculate_cost(dumpster.price_per_day, duration)
        usage.status = UsageStatus.COMPLETED
        if notes:
            usage.notes = notes

        storage.new(usage)
        self._commit("update usage")
        logger.info("usage %s completed: %d min, cost=%.4f", usage.id, duration, usage.total_cost)
        return usage

    def get_by_id(self, usage_id) -> DumpsterUsage:
        return self._get_or_404(DumpsterUsage, parse_uuid(usage_id, "usage"), "usage")

    def _list(self, page, limit, status=None, dumpster_id=None, user_id=None) -> Page:
        query = self.session.query(DumpsterUsage).filter(DumpsterUsage.alive())
        status = parse_status(status)
        if status is not None:
            query = query.filter(DumpsterUsage.status == status)
        if dumpster_id:
            query = query.filter(DumpsterUsage.dumpster_id == parse_uuid(dumpster_id, "dumpster"))
        if user_id:
            query = query.filter(DumpsterUsage.user_id == parse_uuid(user_id, "user"))
        return paginate(query, [DumpsterUsage.start_time.desc()], page, limit)

    def list_by_dumpster(self, dumpster_id, page=1, limit=20, status=None) -> Page:
        return self._list(page, limit, status=status, dumpster_id=parse_uuid(dumpster_id, "dumpster"))

    def list_by_user(self, user_id, page=1, limit=20, status=None) -> Page:
        return self._list(page, limit, status=status, user_id=parse_uuid(user_id, "user"))

    def list(self, page=1, limit=20, status=None, dumpster_id=None, user_id=None) -> Page:
        return self._list(page, limit, status=status, dumpster_id=dumpster_id, user_id=user_id)

    def get_stats(self, dumpster_id=None, user_id=None) -> UsageStats:
        query = self.session.query(
            func.count(DumpsterUsage.id),
            func.coalesce(func.sum(case((DumpsterUsage.status == UsageStatus.ACTIVE, 1), else_=0)), 0),
            func.coalesce(func.sum(case((DumpsterUsage.status == UsageStatus.COMPLETED, 1), else_=0)), 0),
            func.coalesce(func.sum(DumpsterUsage.duration_minutes), 0),
            func.coalesce(func.sum(DumpsterUsage.total_cost), 0.0),
        ).filter(DumpsterUsage.alive())

        if dumpster_id:
            query = query.filter(DumpsterUsage.dumpster_id == parse_uuid(dumpster_id, "dumpster"))
        if user_id:
            query = query.filter(DumpsterUsage.user_id == parse_uuid(user_id, "user"))

        total, active, completed, minutes, revenue = query.one()
        return UsageStats(
            total_usages=int(total or 0),
            active_usages=int(active or 0),
            completed_usages=int(completed or 0),
            total_minutes=int(minutes or 0),
            total_revenue=float(revenue or 0.0),
        )

    def delete(self, usage_id) -> None:
        # TODO: restrict to the session's user or an admin role once one exists
        usage = self._get_or_404(DumpsterUsage, parse_uuid(usage_id, "usage"), "usage")
        usage.soft_delete()
        self._commit("delete usage")
        logger.info("usage %s deleted", usage.id)


usage_service = UsageService()

"""
Reviews and the dumpster rating aggregate.

Each accepted review mutation recomputes Dumpster.rating / review_count from the
non-deleted reviews and commits both writes in one transaction.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models import storage
from models.dumpster import Dumpster
from models.review import Review
from services.base import BaseService, parse_uuid
from services.exceptions import BadRequest, Forbidden, Internal
from services.pagination import Page, paginate

logger = logging.getLogger(__name__)

_UNSET = object()


class ReviewService(BaseService):

    def _existing(self, user_id: str, dumpster_id: str) -> Optional[Review]:
        """Any row for the pair, soft-deleted or not."""
        return (
            self.session.query(Review)
            .filter(Review.user_id == user_id, Review.dumpster_id == dumpster_id)
            .first()
        )

    def recompute_rating(self, dumpster_id: str) -> Dumpster:
        """
        Overwrite the dumpster's rating/review_count from its live reviews.
        Flushes pending review changes first; does not commit.
        """
        try:
            storage.flush()
            avg_rating, count = (
                self.session.query(func.coalesce(func.avg(Review.rating), 0.0), func.count(Review.id))
                .filter(Review.dumpster_id == dumpster_id, Review.alive())
                .one()
            )
        except SQLAlchemyError as exc:
            storage.rollback()
            logger.exception("failed to aggregate ratings for dumpster %s", dumpster_id)
            raise Internal("failed to update dumpster rating") from exc

        dumpster = self._get_or_404(Dumpster, dumpster_id, "dumpster")
        dumpster.rating = float(avg_rating or 0.0)
        dumpster.review_count = int(count or 0)
        storage.new(dumpster)
        logger.info("dumpster %s rating recomputed: %.2f over %d reviews", dumpster_id, dumpster.rating, dumpster.review_count)
        return dumpster

    def create(self, user_id, dumpster_id, rating: int, comment: Optional[str] = None) -> Review:
        user_id = parse_uuid(user_id, "user")
        dumpster_id = parse_uuid(dumpster_id, "dumpster")
        self._get_or_404(Dumpster, dumpster_id, "dumpster")

        review = self._existing(user_id, dumpster_id)
        if review is not None and not review.is_deleted:
            raise BadRequest("you have already reviewed this dumpster")

        if review is None:
            review = Review(user_id=user_id, dumpster_id=dumpster_id, rating=rating, comment=comment)
        else:
            # revive the user's earlier, deleted review of this dumpster
            review.rating = rating
            review.comment = comment
            review.restore()
        storage.new(review)
        # a concurrent create slipping past the check above fails here on the unique pair
        self._flush("create review", duplicate_message="you have already reviewed this dumpster")

        self.recompute_rating(dumpster_id)
        self._commit("create review", duplicate_message="you have already reviewed this dumpster")
        logger.info("review %s created for dumpster %s", review.id, dumpster_id)
        return review

    def get_by_id(self, review_id) -> Review:
        return self._get_or_404(Review, parse_uuid(review_id, "review"), "review")

    def _owned(self, user_id, review_id, verb: str) -> Review:
        review_id = parse_uuid(review_id, "review")
        user_id = parse_uuid(user_id, "user")
        review = self._get_or_404(Review, review_id, "review")
        if review.user_id != user_id:
            raise Forbidden(f"you don't have permission to {verb} this review")
        return review

    def update(self, user_id, review_id, rating=_UNSET, comment=_UNSET) -> Review:
        review = self._owned(user_id, review_id, "update")
        if rating is not _UNSET and rating is not None:
            review.rating = rating
        if comment is not _UNSET:
            review.comment = comment
        storage.new(review)

        self.recompute_rating(review.dumpster_id)
        self._commit("update review")
        logger.info("review %s updated", review.id)
        return review

    def delete(self, user_id, review_id) -> None:
        review = self._owned(user_id, review_id, "delete")
        review.soft_delete()

        self.recompute_rating(review.dumpster_id)
        self._commit("delete review")
        logger.info("review %s deleted", review.id)

    def _list(self, page, limit, **filters) -> Page:
        query = self.session.query(Review).filter(Review.alive())
        for column, value in filters.items():
            query = query.filter(getattr(Review, column) == value)
        return paginate(query, [Review.created_at.desc()], page, limit)

    def list_by_dumpster(self, dumpster_id, page=1, limit=20) -> Page:
        return self._list(page, limit, dumpster_id=parse_uuid(dumpster_id, "dumpster"))

    def list_by_user(self, user_id, page=1, limit=20) -> Page:
        return self._list(page, limit, user_id=parse_uuid(user_id, "user"))


review_service = ReviewService()

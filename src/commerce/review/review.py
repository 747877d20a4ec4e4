"""Review aggregate (CQRS): a user's star rating and comment on a product.

Reviews are published as soon as they are submitted. Removal is a soft
delete: a Removed review keeps its record but no longer counts towards the
product's rating and no longer blocks the user from reviewing again.

State Machine:
    PUBLISHED → REMOVED
    REMOVED → (terminal)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from commerce.domain import commerce
from commerce.errors import NotFound
from commerce.review.events import (
    AdminReplyAdded,
    ReviewEdited,
    ReviewRemoved,
    ReviewSubmitted,
)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

MAX_COMMENT_LENGTH = 1000


class ReviewStatus(Enum):
    PUBLISHED = "Published"
    REMOVED = "Removed"


def author_product_key(user_id, product_id) -> str:
    return f"{user_id}:{product_id}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@commerce.value_object(part_of="Review")
class Rating:
    """A star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@commerce.entity(part_of="Review")
class AdminReply:
    comment = Text(required=True)
    replied_by = Identifier(required=True)
    replied_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@commerce.aggregate
class Review:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    # "<user_id>:<product_id>" while the review is live, cleared on removal
    author_product = String(max_length=255, unique=True)
    rating = ValueObject(Rating, required=True)
    comment = Text(required=True)
    admin_reply = HasMany(AdminReply)
    status = String(choices=ReviewStatus, default=ReviewStatus.PUBLISHED.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def comment_within_limit(self):
        if self.comment and len(self.comment) > MAX_COMMENT_LENGTH:
            raise ValidationError({"comment": [f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters"]})

    @invariant.post
    def at_most_one_admin_reply(self):
        if len(self.admin_reply) > 1:
            raise ValidationError({"admin_reply": ["A review can have at most one admin reply"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(cls, product_id, user_id, rating, comment=None):
        now = datetime.now(UTC)
        review = cls(
            product_id=product_id,
            user_id=user_id,
            rating=Rating(score=rating),
            comment=comment,
            author_product=author_product_key(user_id, product_id),
            status=ReviewStatus.PUBLISHED.value,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                user_id=str(user_id),
                rating=rating,
                comment=comment,
                submitted_at=now,
            )
        )
        return review

    @property
    def is_live(self) -> bool:
        return self.status == ReviewStatus.PUBLISHED.value

    def is_authored_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def _assert_live(self, action):
        if not self.is_live:
            raise ValidationError({"status": [f"Cannot {action} a removed review"]})

    # -------------------------------------------------------------------
    # Author actions
    # -------------------------------------------------------------------
    def edit(self, rating=_UNSET, comment=_UNSET):
        self._assert_live("edit")

        now = datetime.now(UTC)
        previous_rating = self.rating.score

        with atomic_change(self):
            if rating is not _UNSET and rating is not None:
                self.rating = Rating(score=rating)
            if comment is not _UNSET and comment:
                self.comment = comment
            self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                product_id=str(self.product_id),
                user_id=str(self.user_id),
                previous_rating=previous_rating,
                rating=self.rating.score,
                comment=self.comment,
                edited_at=now,
            )
        )

    def remove(self):
        self._assert_live("remove")

        now = datetime.now(UTC)
        self.status = ReviewStatus.REMOVED.value
        self.author_product = None
        self.updated_at = now

        self.raise_(
            ReviewRemoved(
                review_id=str(self.id),
                product_id=str(self.product_id),
                user_id=str(self.user_id),
                rating=self.rating.score,
                removed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Admin reply
    # -------------------------------------------------------------------
    def reply(self, admin_id, comment):
        """Attach the store's reply, replacing any earlier one."""
        self._assert_live("reply to")

        now = datetime.now(UTC)
        if self.admin_reply:
            self.remove_admin_reply(self.admin_reply[0])
        self.add_admin_reply(AdminReply(comment=comment, replied_by=admin_id, replied_at=now))
        self.updated_at = now

        self.raise_(
            AdminReplyAdded(
                review_id=str(self.id),
                product_id=str(self.product_id),
                admin_id=str(admin_id),
                comment=comment,
                replied_at=now,
            )
        )


@commerce.repository(part_of=Review)
class ReviewRepository:
    def fetch(self, review_id) -> Review:
        try:
            return self.get(review_id)
        except ObjectNotFoundError:
            raise NotFound("Review", review_id) from None

    def live_for_product(self, product_id) -> list[Review]:
        """Published reviews of a product, newest first."""
        reviews = self._dao.query.filter(
            product_id=str(product_id),
            status=ReviewStatus.PUBLISHED.value,
        ).all().items
        return sorted(reviews, key=lambda r: r.created_at, reverse=True)

    def live_by(self, user_id, product_id) -> Review | None:
        reviews = self._dao.query.filter(
            user_id=str(user_id),
            product_id=str(product_id),
            status=ReviewStatus.PUBLISHED.value,
        ).all().items
        return reviews[0] if reviews else None

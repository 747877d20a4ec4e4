"""Domain events for the Review aggregate.

ReviewSubmitted, ReviewEdited and ReviewRemoved each trigger a full rating
recomputation for the reviewed product.
"""

from protean.fields import DateTime, Identifier, Integer, Text

from commerce.domain import commerce


@commerce.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    submitted_at = DateTime(required=True)


@commerce.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_rating = Integer(required=True)
    rating = Integer(required=True)
    comment = Text()
    edited_at = DateTime(required=True)


@commerce.event(part_of="Review")
class ReviewRemoved:
    """The author withdrew the review; it no longer counts towards the rating."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    removed_at = DateTime(required=True)


@commerce.event(part_of="Review")
class AdminReplyAdded:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    comment = Text(required=True)
    replied_at = DateTime(required=True)

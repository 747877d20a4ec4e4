"""Tests for the Review aggregate: submission, edits, soft removal and admin replies."""

import pytest
from commerce.review.events import AdminReplyAdded, ReviewEdited, ReviewRemoved, ReviewSubmitted
from commerce.review.review import MAX_COMMENT_LENGTH, Rating, Review, ReviewStatus
from protean.exceptions import ValidationError


def _review(rating=4, comment="Lovely fabric"):
    review = Review.submit(product_id="prod-001", user_id="user-001", rating=rating, comment=comment)
    review._events.clear()
    return review


class TestSubmission:
    def test_submit_publishes(self):
        review = Review.submit(product_id="prod-001", user_id="user-001", rating=5, comment="Great")
        assert review.status == ReviewStatus.PUBLISHED.value
        assert review.is_live
        assert review.rating.score == 5

    def test_submit_raises_event(self):
        review = Review.submit(product_id="prod-001", user_id="user-001", rating=5, comment="Great")
        event = review._events[0]
        assert isinstance(event, ReviewSubmitted)
        assert event.rating == 5
        assert event.product_id == "prod-001"

    @pytest.mark.parametrize("score", [0, 6, -1])
    def test_out_of_range_rating_rejected(self, score):
        with pytest.raises(ValidationError) as exc:
            Review.submit(product_id="prod-001", user_id="user-001", rating=score, comment="Great")
        assert "rating" in exc.value.messages

    @pytest.mark.parametrize("score", [1, 5])
    def test_boundary_ratings_accepted(self, score):
        assert Rating(score=score).score == score

    def test_comment_at_limit_accepted(self):
        review = _review(comment="x" * MAX_COMMENT_LENGTH)
        assert len(review.comment) == MAX_COMMENT_LENGTH

    def test_comment_over_limit_rejected(self):
        with pytest.raises(ValidationError):
            _review(comment="x" * (MAX_COMMENT_LENGTH + 1))

    def test_authorship(self):
        review = _review()
        assert review.is_authored_by("user-001")
        assert not review.is_authored_by("user-002")

    def test_comment_is_required(self):
        with pytest.raises(ValidationError) as exc:
            Review.submit(product_id="prod-001", user_id="user-001", rating=4)
        assert "comment" in exc.value.messages

    def test_live_review_carries_author_product_key(self):
        review = _review()
        assert review.author_product == "user-001:prod-001"


class TestEdit:
    def test_edit_rating(self):
        review = _review(rating=4)
        review.edit(rating=2)
        assert review.rating.score == 2
        assert review.comment == "Lovely fabric"
        event = review._events[-1]
        assert isinstance(event, ReviewEdited)
        assert event.previous_rating == 4
        assert event.rating == 2

    def test_edit_comment_only(self):
        review = _review(rating=4)
        review.edit(comment="Colour faded after a wash")
        assert review.rating.score == 4
        assert review.comment == "Colour faded after a wash"

    def test_edit_to_invalid_rating_rejected(self):
        review = _review(rating=4)
        with pytest.raises(ValidationError):
            review.edit(rating=9)

    def test_blank_comment_keeps_previous(self):
        review = _review()
        review.edit(rating=3, comment="")
        assert review.comment == "Lovely fabric"

    def test_edit_removed_review_rejected(self):
        review = _review()
        review.remove()
        with pytest.raises(ValidationError):
            review.edit(rating=1)


class TestRemoval:
    def test_remove_is_soft(self):
        review = _review()
        review.remove()
        assert review.status == ReviewStatus.REMOVED.value
        assert not review.is_live
        assert review.rating.score == 4
        event = review._events[-1]
        assert isinstance(event, ReviewRemoved)
        assert event.rating == 4

    def test_remove_clears_author_product_key(self):
        review = _review()
        review.remove()
        assert review.author_product is None

    def test_remove_twice_rejected(self):
        review = _review()
        review.remove()
        with pytest.raises(ValidationError):
            review.remove()


class TestAdminReply:
    def test_reply(self):
        review = _review()
        review.reply(admin_id="admin-001", comment="Thank you for shopping with us")
        assert len(review.admin_reply) == 1
        assert review.admin_reply[0].comment == "Thank you for shopping with us"
        assert isinstance(review._events[-1], AdminReplyAdded)

    def test_reply_leaves_rating_untouched(self):
        review = _review(rating=3)
        review.reply(admin_id="admin-001", comment="Sorry to hear that")
        assert review.rating.score == 3
        assert not any(isinstance(e, ReviewEdited) for e in review._events)

    def test_second_reply_replaces_first(self):
        review = _review()
        review.reply(admin_id="admin-001", comment="Thanks")
        review.reply(admin_id="admin-002", comment="Thanks again")
        assert len(review.admin_reply) == 1
        assert review.admin_reply[0].comment == "Thanks again"
        assert review.admin_reply[0].replied_by == "admin-002"

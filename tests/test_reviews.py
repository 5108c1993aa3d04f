"""Tests for the create-review pipeline and the read path."""

import pytest

from app.core.config import Settings
from app.core.errors import ClassifierError
from app.models.review import Review
from app.schemas.review import ClassificationOutcome, ClassificationResult, ReviewCreate
from app.services.llm import fallback_classification
from app.services.reviews import float_anchor, list_reviews, parse_anchor_id, submit_review


def payload(**overrides):
    data = {
        "business_id": "biz-1",
        "reviewer_name": "Jordan",
        "phone": "555-0199",
        "content": "Great service!",
    }
    data.update(overrides)
    return ReviewCreate(**data)


def verdict(safety, sentiment, action):
    return ClassificationOutcome(
        result=ClassificationResult(safety_score=safety, sentiment_score=sentiment, action=action)
    )


class TestSubmitReview:
    def test_positive_review_is_approved(self, store, fake_llm, settings):
        fake_llm.classification = verdict(0.1, 0.8, "allow")

        review, outcome = submit_review(store, fake_llm, payload(), settings)

        assert review.id is not None
        assert review.status == "approved"
        assert review.is_positive is True
        assert review.sentiment_score == 0.8
        assert review.pinned is False
        assert outcome.fallback is False
        assert fake_llm.classified == ["Great service!"]

    def test_abusive_review_is_flagged(self, store, fake_llm, settings):
        fake_llm.classification = verdict(0.9, -0.5, "block")

        review, _ = submit_review(store, fake_llm, payload(content="You are all ****"), settings)

        assert review.status == "flagged"
        assert review.is_positive is False

    def test_unparseable_classification_waits_for_review(self, store, fake_llm, settings):
        fake_llm.classification = fallback_classification()

        review, outcome = submit_review(store, fake_llm, payload(), settings)

        assert review.status == "pending"
        assert review.is_positive is False
        assert outcome.fallback is True

    def test_zero_sentiment_is_not_positive(self, store, fake_llm, settings):
        fake_llm.classification = verdict(0.1, 0.0, "allow")
        review, _ = submit_review(store, fake_llm, payload(), settings)
        assert review.is_positive is False

    def test_strict_policy_setting_is_applied(self, store, fake_llm):
        fake_llm.classification = verdict(0.1, 0.2, "allow")
        strict = Settings(moderation_require_positive_sentiment=True)

        review, _ = submit_review(store, fake_llm, payload(), strict)

        assert review.status == "pending"

    def test_classifier_error_stores_nothing(self, store, fake_llm, settings, db_session):
        fake_llm.error = ClassifierError("provider down")

        with pytest.raises(ClassifierError):
            submit_review(store, fake_llm, payload(), settings)

        assert db_session.query(Review).count() == 0

    def test_optional_email_is_kept(self, store, fake_llm, settings):
        review, _ = submit_review(store, fake_llm, payload(email="j@example.com"), settings)
        assert review.email == "j@example.com"


class TestReadPath:
    def test_pinned_first_then_newest(self, store, make_review):
        old_pinned = make_review(age=60, pinned=True)
        newest = make_review(age=0)
        middle = make_review(age=30)
        new_pinned = make_review(age=10, pinned=True)
        make_review(age=5, status="pending")
        make_review(age=5, business_id="biz-2")

        reviews = list_reviews(store, "biz-1")

        assert [r.id for r in reviews] == [new_pinned.id, old_pinned.id, newest.id, middle.id]

    def test_anchor_moves_to_front(self, store, make_review):
        pinned = make_review(age=30, pinned=True)
        newest = make_review(age=0)
        anchor = make_review(age=20)
        oldest = make_review(age=40)

        reviews = list_reviews(store, "biz-1", anchor_id=anchor.id)

        assert [r.id for r in reviews] == [anchor.id, pinned.id, newest.id, oldest.id]

    def test_anchor_already_first(self, store, make_review):
        first = make_review(age=0)
        second = make_review(age=10)
        reviews = list_reviews(store, "biz-1", anchor_id=first.id)
        assert [r.id for r in reviews] == [first.id, second.id]

    def test_non_approved_anchor_changes_nothing(self, store, make_review):
        newest = make_review(age=0)
        older = make_review(age=10)
        pending = make_review(age=5, status="pending")

        reviews = list_reviews(store, "biz-1", anchor_id=pending.id)

        assert [r.id for r in reviews] == [newest.id, older.id]

    def test_unknown_anchor_changes_nothing(self, store, make_review):
        newest = make_review(age=0)
        older = make_review(age=10)
        assert [r.id for r in list_reviews(store, "biz-1", anchor_id=12345)] == [newest.id, older.id]

    def test_float_anchor_is_stable(self):
        assert float_anchor([1, 2, 3, 4, 5], 4, key=lambda x: x) == [4, 1, 2, 3, 5]
        assert float_anchor([1, 2, 3], None, key=lambda x: x) == [1, 2, 3]

    @pytest.mark.parametrize(
        "raw,expected",
        [(None, None), ("", None), ("abc", None), ("12", 12), (" 7 ", 7), ("1.5", None), ("9" * 5000, None)],
    )
    def test_parse_anchor_id(self, raw, expected):
        assert parse_anchor_id(raw) == expected

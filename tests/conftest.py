"""Shared fixtures: in-memory database, fake classifier, API client."""

import os
from datetime import datetime, timedelta, timezone

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.review import Review
from app.schemas.ranking import TopSelection
from app.schemas.review import ClassificationOutcome, ClassificationResult
from app.services.llm import get_llm_service
from app.services.review_store import ReviewStore

BASE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeLLM:
    """Scripted stand-in for LLMService.

    ``selection`` is either a TopSelection or a callable taking the candidate
    list and returning one (or raising).
    """

    def __init__(self) -> None:
        self.classification = ClassificationOutcome(
            result=ClassificationResult(safety_score=0.1, sentiment_score=0.8, action="allow")
        )
        self.selection = TopSelection()
        self.error = None
        self.classified: list[str] = []
        self.ranked: list[list] = []

    def classify_review(self, content):
        self.classified.append(content)
        if self.error is not None:
            raise self.error
        return self.classification

    def select_top_reviews(self, candidates, top_k=3):
        self.ranked.append(list(candidates))
        if self.error is not None:
            raise self.error
        if callable(self.selection):
            return self.selection(candidates)
        return self.selection


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def store(db_session):
    return ReviewStore(db_session)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def settings():
    return Settings(webhook_secret=None, moderation_require_positive_sentiment=False)


@pytest.fixture
def make_review(db_session):
    """Insert a review row directly; ``age`` in minutes before BASE_TIME."""

    def _make(business_id="biz-1", status="approved", pinned=False, age=0, content=None, **extra):
        review = Review(
            business_id=business_id,
            reviewer_name=extra.pop("reviewer_name", "Alex"),
            phone=extra.pop("phone", "555-0100"),
            content=content or f"Review for {business_id} ({age})",
            status=status,
            sentiment_score=extra.pop("sentiment_score", 0.5),
            is_positive=extra.pop("is_positive", True),
            pinned=pinned,
            created_at=BASE_TIME - timedelta(minutes=age),
            **extra,
        )
        db_session.add(review)
        db_session.commit()
        db_session.refresh(review)
        return review

    return _make


@pytest.fixture
def client(db_session, fake_llm, settings):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_llm_service] = lambda: fake_llm
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()

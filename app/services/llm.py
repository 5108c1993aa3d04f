"""Classifier gateway backed by the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Iterable

from openai import OpenAI, OpenAIError

from app.core.config import Settings, get_settings
from app.core.errors import ClassifierError
from app.schemas.ranking import ReviewCandidate, TopSelection
from app.schemas.review import ClassificationOutcome, ClassificationResult

logger = logging.getLogger(__name__)

MODERATION_ACTIONS = ("allow", "flag", "block")

# 파싱 실패 시 자동 승인/차단 대신 수동 검토(pending)로 보내는 값
FALLBACK_SAFETY_SCORE = 0.5
FALLBACK_SENTIMENT_SCORE = 0.0
FALLBACK_ACTION = "flag"

DEFAULT_TOP_K = 3

MODERATION_SYSTEM_PROMPT = (
    "You are a content moderation assistant for customer reviews of local businesses. "
    "Judge whether a review contains inappropriate or harmful content "
    "(hate, harassment, threats, profanity, personal data, spam) and how positive it is. "
    "Return JSON only."
)

RANKING_SYSTEM_PROMPT = (
    "You are a review quality analyzer. You pick the most valuable customer reviews "
    "to feature on a business page. Return JSON only."
)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def build_moderation_prompt(content: str) -> str:
    """User prompt for classifying a single review."""
    return (
        "Analyze this review for inappropriate or harmful content.\n"
        "Respond ONLY with a JSON object in this exact structure:\n"
        "{\n"
        '  "safety_score": number between 0 (safe) and 1 (harmful),\n'
        '  "sentiment_score": number between -1 (negative) and 1 (positive),\n'
        '  "action": "allow" | "flag" | "block"\n'
        "}\n\n"
        f"Review: {json.dumps(content, ensure_ascii=False)}"
    )


def build_ranking_prompt(candidates: Iterable[ReviewCandidate], top_k: int = DEFAULT_TOP_K) -> str:
    """User prompt asking for the top-k reviews among ``candidates``."""
    payload = [candidate.model_dump() for candidate in candidates]
    return (
        f"Analyze these customer reviews and identify the TOP {top_k} BEST reviews "
        "that should be pinned/highlighted.\n\n"
        'Criteria for "best" reviews:\n'
        "- High quality, detailed feedback\n"
        "- Specific examples or descriptions\n"
        "- Positive sentiment and helpfulness\n"
        "- Well-written and authentic\n"
        "- Most valuable for potential customers\n\n"
        "Reviews to analyze:\n"
        f"{json.dumps(payload, indent=2, ensure_ascii=False)}\n\n"
        "Respond with ONLY a JSON object in this exact format (no markdown, no code blocks):\n"
        "{\n"
        '  "top_review_ids": [id1, id2, id3],\n'
        f'  "reasoning": "Brief explanation of why these {top_k} were chosen"\n'
        "}\n\n"
        f"IMPORTANT: Return exactly {top_k} review IDs (or fewer if less than {top_k} reviews exist). "
        "Use the actual review IDs from the data provided."
    )


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) block."""
    cleaned = text.strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        return match.group(1).strip()
    if cleaned.startswith("```"):
        # 닫는 펜스가 없는 경우: 여는 줄만 제거
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
    return cleaned.strip()


def load_json_object(text: str | None) -> dict[str, Any] | None:
    """Best-effort JSON object extraction; ``None`` when nothing usable is found."""
    if not text or not text.strip():
        return None
    cleaned = strip_code_fences(text)
    # ValueError also covers the int digit limit, not only JSONDecodeError
    try:
        data = json.loads(cleaned)
    except ValueError:
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            data = json.loads(cleaned[start : end + 1])
        except ValueError:
            return None
    return data if isinstance(data, dict) else None


def _coerce_score(value: Any, low: float, high: float) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        score = float(value)
    except (OverflowError, ValueError):
        return None
    if math.isnan(score):
        return None
    return min(max(score, low), high)


def _coerce_action(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    action = value.strip().lower()
    return action if action in MODERATION_ACTIONS else None


def _coerce_review_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def fallback_classification() -> ClassificationOutcome:
    return ClassificationOutcome(
        result=ClassificationResult(
            safety_score=FALLBACK_SAFETY_SCORE,
            sentiment_score=FALLBACK_SENTIMENT_SCORE,
            action=FALLBACK_ACTION,
        ),
        fallback=True,
    )


def parse_classification(text: str | None) -> ClassificationOutcome:
    """Normalize model text into a classification, never raising.

    Missing or invalid fields are filled from the conservative fallback and
    the outcome is marked as a fallback.
    """
    data = load_json_object(text)
    if data is None:
        logger.warning("Unparseable classifier output, using fallback: %r", text)
        return fallback_classification()

    safety = _coerce_score(data.get("safety_score"), 0.0, 1.0)
    sentiment = _coerce_score(data.get("sentiment_score"), -1.0, 1.0)
    action = _coerce_action(data.get("action"))
    defaulted = [
        name
        for name, value in (("safety_score", safety), ("sentiment_score", sentiment), ("action", action))
        if value is None
    ]
    if defaulted:
        logger.warning("Classifier output missing %s, using fallback values", ", ".join(defaulted))

    return ClassificationOutcome(
        result=ClassificationResult(
            safety_score=FALLBACK_SAFETY_SCORE if safety is None else safety,
            sentiment_score=FALLBACK_SENTIMENT_SCORE if sentiment is None else sentiment,
            action=FALLBACK_ACTION if action is None else action,
        ),
        fallback=bool(defaulted),
    )


def parse_top_selection(text: str | None) -> TopSelection:
    """Normalize model text into an ordered, de-duplicated id selection."""
    data = load_json_object(text)
    if data is None:
        logger.warning("Unparseable ranking output, selecting nothing: %r", text)
        return TopSelection()

    raw_ids = data.get("top_review_ids")
    ids: list[int] = []
    if isinstance(raw_ids, list):
        for raw in raw_ids:
            review_id = _coerce_review_id(raw)
            if review_id is not None and review_id not in ids:
                ids.append(review_id)
    reasoning = data.get("reasoning")
    return TopSelection(
        top_review_ids=ids,
        reasoning=reasoning if isinstance(reasoning, str) else "",
    )


class LLMService:
    """Wrapper around the OpenAI chat API for moderation and ranking."""

    def __init__(self, settings: Settings | None = None, client: OpenAI | None = None) -> None:
        self._settings = settings or get_settings()
        if client is None:
            if not self._settings.openai_api_key:
                raise ClassifierError("OPENAI_API_KEY is not configured.")
            client = OpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url,
                timeout=self._settings.llm_timeout_seconds,
                max_retries=0,
            )
        self._client = client

    def classify_review(self, content: str) -> ClassificationOutcome:
        """Classify one review's safety and sentiment."""
        text = self._complete(MODERATION_SYSTEM_PROMPT, build_moderation_prompt(content))
        return parse_classification(text)

    def select_top_reviews(
        self,
        candidates: list[ReviewCandidate],
        top_k: int = DEFAULT_TOP_K,
    ) -> TopSelection:
        """Ask the model which candidates deserve to be pinned.

        Returned ids are whatever the model said; callers must validate them.
        """
        text = self._complete(RANKING_SYSTEM_PROMPT, build_ranking_prompt(candidates, top_k))
        selection = parse_top_selection(text)
        logger.info("Top review ids selected: %s", selection.top_review_ids)
        return selection

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        extra: dict[str, Any] = {}
        if self._settings.llm_json_mode:
            extra["response_format"] = {"type": "json_object"}
        try:
            response = self._client.chat.completions.create(
                model=self._settings.openai_response_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._settings.llm_temperature,
                **extra,
            )
        except OpenAIError as exc:
            logger.error("Classifier provider error: %s", exc)
            raise ClassifierError(f"Classifier API error: {exc}") from exc

        if not response.choices:
            logger.error("Classifier returned no choices")
            raise ClassifierError("Classifier API error: empty response")
        content = response.choices[0].message.content or ""
        logger.debug("Classifier raw output: %s", content)
        return content


_llm_service_instance: LLMService | None = None


def get_llm_service() -> LLMService:
    """Lazy initialization of LLM service."""
    global _llm_service_instance
    if _llm_service_instance is None:
        _llm_service_instance = LLMService()
    return _llm_service_instance

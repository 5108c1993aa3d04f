"""
상위 리뷰 고정(pin) 스크립트
---------------------------
승인된 리뷰가 있는 모든 business 에 대해 상위 리뷰를 다시 선정합니다.

매일 03:00 IST (21:30 UTC) 실행을 가정한 cron 예시:

    30 21 * * * cd /srv/reviews && python scripts/pin_top_reviews.py
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# 환경 변수 로드
from dotenv import load_dotenv

BACKEND_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(BACKEND_ROOT / ".env")

# backend 모듈 import를 위해 경로 추가
sys.path.insert(0, str(BACKEND_ROOT))

from app.core.config import get_settings
from app.core.errors import ReviewServiceError
from app.core.logging import configure_logging
from app.db.session import SessionLocal
from app.services.llm import LLMService
from app.services.ranking import rerank_business
from app.services.review_store import ReviewStore
from app.services.scheduler import run_daily


def main() -> int:
    parser = argparse.ArgumentParser(description="Pin the top reviews of every business")
    parser.add_argument(
        "--business-id",
        action="append",
        dest="business_ids",
        help="특정 business 만 처리 (여러 번 지정 가능)",
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)

    db = SessionLocal()
    try:
        store = ReviewStore(db)
        llm = LLMService(settings)
        if args.business_ids:
            results = []
            for business_id in args.business_ids:
                try:
                    outcome = rerank_business(store, llm, business_id, top_k=settings.pin_top_k)
                except ReviewServiceError as exc:
                    results.append({"business_id": business_id, "success": False, "error": exc.message})
                    continue
                results.append({"business_id": business_id, "success": True, **outcome.model_dump(by_alias=True)})
        else:
            results = [r.model_dump(by_alias=True) for r in run_daily(store, llm, top_k=settings.pin_top_k)]
    except ReviewServiceError as exc:
        print(json.dumps({"error": exc.message}, ensure_ascii=False))
        return 1
    finally:
        db.close()

    print(json.dumps({"results": results}, ensure_ascii=False, indent=2))
    return 0 if all(r["success"] for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())

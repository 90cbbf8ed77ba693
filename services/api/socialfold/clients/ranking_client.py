"""
Ranking service client.

Sends the viewer and the candidate posts to the ranking service and returns
them best-first. When the service is disabled, unreachable, errors out, or
answers with a body that is not a permutation of the posts sent, the same
ranker runs in-process so the feed always returns results.
"""
import logging
from collections import Counter
from typing import Optional

import httpx
from pydantic import ValidationError

from feedrank.ranker import rank_with_scores
from feedrank.schemas import RankablePost, RankResponse, Viewer
from socialfold.config import settings
from socialfold.telemetry import RANKING_ERRORS_TOTAL

logger = logging.getLogger(__name__)

RANKED_BY_SERVICE = "ranking-service"
RANKED_LOCALLY = "local"


class RankingClient:
    def __init__(self) -> None:
        self._http: Optional[httpx.AsyncClient] = None

    async def start(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        if not settings.ranking_use_remote and transport is None:
            logger.info("Ranking service disabled — ranking in-process")
            return
        self._http = httpx.AsyncClient(
            base_url=settings.ranking_service_url,
            timeout=settings.ranking_timeout_seconds,
            transport=transport,
        )

    async def stop(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    async def rank(
        self,
        viewer: Viewer,
        posts: list[RankablePost],
    ) -> tuple[list[tuple[str, float]], str]:
        """
        Rank ``posts`` for ``viewer``.

        Request body:
          { "viewer": {...}, "posts": [{ "post_id", "created_at", ... }] }

        Response:
          { "posts": [{ "post_id", "score", "breakdown" }] }

        Returns ([(post_id, score), ...] best-first, ranked_by).
        """
        if not posts:
            return [], RANKED_LOCALLY

        if self._http is not None:
            payload = {
                "viewer": viewer.model_dump(mode="json"),
                "posts": [p.model_dump(mode="json") for p in posts],
            }
            try:
                resp = await self._http.post("/rank", json=payload)
                resp.raise_for_status()
                body = RankResponse.model_validate(resp.json())
                ranked = [(p.post_id, p.score) for p in body.posts]
                if Counter(pid for pid, _ in ranked) != Counter(p.post_id for p in posts):
                    raise ValueError(
                        f"returned {len(ranked)} posts that do not match the "
                        f"{len(posts)} sent"
                    )
                return ranked, RANKED_BY_SERVICE
            except (httpx.HTTPError, ValidationError, ValueError) as exc:
                logger.warning(
                    "Ranking service unavailable: %s — ranking in-process", exc
                )
                RANKING_ERRORS_TOTAL.inc()

        ranked = [
            (post.post_id, round(breakdown.total, 4))
            for post, breakdown in rank_with_scores(posts, viewer)
        ]
        return ranked, RANKED_LOCALLY


# Singleton
ranking_client = RankingClient()

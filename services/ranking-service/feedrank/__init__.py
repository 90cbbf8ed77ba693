"""Home timeline ranking."""

from feedrank.ranker import rank, rank_with_scores, score_post
from feedrank.schemas import MediaDescriptor, RankablePost, ScoreBreakdown, Viewer

__all__ = [
    "rank",
    "rank_with_scores",
    "score_post",
    "MediaDescriptor",
    "RankablePost",
    "ScoreBreakdown",
    "Viewer",
]

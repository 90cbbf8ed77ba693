"""
Ranking Service — scores home timeline candidates over HTTP.

The API service sends the viewer plus every candidate post it fetched from
storage; this service returns the same posts ordered best-first together
with the per-term score breakdown (see feedrank.ranker for the formula).

Requests may carry a ``seed`` to make the jitter term reproducible, and a
``now`` timestamp to rank against a fixed clock.
"""
import logging
import random
import time

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from prometheus_client import Counter, Histogram, make_asgi_app

from feedrank.config import settings
from feedrank.ranker import rank_with_scores
from feedrank.schemas import RankedPost, RankRequest, RankResponse

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# ── OTel ──────────────────────────────────────────────────────────────────
if settings.otel_enabled:
    resource = Resource.create({"service.name": settings.service_name})
    provider = TracerProvider(resource=resource)
    try:
        exporter = OTLPSpanExporter(
            endpoint=settings.otel_exporter_otlp_endpoint, insecure=True
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
    except Exception as exc:
        logger.warning("OTel exporter unavailable: %s — traces disabled", exc)
    trace.set_tracer_provider(provider)
tracer = trace.get_tracer(__name__)

# ── Prometheus ─────────────────────────────────────────────────────────────
RANKING_LATENCY = Histogram(
    "ranking_latency_seconds",
    "Time spent scoring a batch of candidates",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

RANKED_POSTS_TOTAL = Counter(
    "ranked_posts_total",
    "Total number of posts scored by the ranker",
)


# ── App ────────────────────────────────────────────────────────────────────

app = FastAPI(title="Ranking Service", version="1.0.0")
if settings.otel_enabled:
    FastAPIInstrumentor.instrument_app(app)
app.mount("/metrics", make_asgi_app())


@app.post("/rank", response_model=RankResponse)
def rank(request: RankRequest):
    """Order a batch of candidate posts for one viewer."""
    with tracer.start_as_current_span("rank_candidates") as span:
        t0 = time.perf_counter()

        rng = random.Random(request.seed) if request.seed is not None else None
        ranked = rank_with_scores(request.posts, request.viewer, request.now, rng)

        latency = time.perf_counter() - t0
        RANKING_LATENCY.observe(latency)
        RANKED_POSTS_TOTAL.inc(len(ranked))

        span.set_attribute("viewer.id", request.viewer.user_id)
        span.set_attribute("batch.size", len(request.posts))
        span.set_attribute("ranking.latency_ms", round(latency * 1000, 2))

        return RankResponse(
            posts=[
                RankedPost(
                    post_id=post.post_id,
                    score=round(breakdown.total, 4),
                    breakdown=breakdown,
                )
                for post, breakdown in ranked
            ]
        )


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.service_name}

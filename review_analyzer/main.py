import time
import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from .schemas import (
    AnalysisRequest,
    AnalysisResponse,
    CorpusResponse,
    ReviewResponse,
    StateResponse,
)
from .controller import AnalysisController, SnapshotSink
from .metrics import REQUESTS, LATENCY
from .outcomes import AnalysisKind, Category, describe
from .settings import settings
from .logging_config import setup_logging

setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)

app = FastAPI(title="Review Analyzer", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

controller = AnalysisController.from_settings(settings, sink=SnapshotSink())
controller.load()

@app.get("/healthz")
def healthz():
    return {"status": "ok"}

@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)

@app.get("/v1/reviews", response_model=CorpusResponse)
def reviews():
    return CorpusResponse(count=controller.review_count)

@app.post("/v1/reviews/random", response_model=ReviewResponse)
def random_review():
    REQUESTS.labels("/v1/reviews/random").inc()
    review = controller.select_random_review()
    if review is None:
        raise HTTPException(status_code=404, detail=describe(Category.EMPTY_CORPUS))
    return ReviewResponse(text=review.text)

def _analyze(kind: AnalysisKind, req: AnalysisRequest) -> AnalysisResponse:
    start = time.time()
    result = controller.analyze(kind, auth_token=req.api_token)
    LATENCY.observe(time.time() - start)
    if result is None:
        raise HTTPException(
            status_code=409,
            detail="Another analysis is in progress or the review changed; please retry.",
        )
    return AnalysisResponse.from_interpretation(result)

@app.post("/v1/sentiment", response_model=AnalysisResponse)
def sentiment(req: AnalysisRequest):
    REQUESTS.labels("/v1/sentiment").inc()
    return _analyze(AnalysisKind.SENTIMENT, req)

@app.post("/v1/nouns", response_model=AnalysisResponse)
def nouns(req: AnalysisRequest):
    REQUESTS.labels("/v1/nouns").inc()
    return _analyze(AnalysisKind.NOUN_DENSITY, req)

@app.get("/v1/state", response_model=StateResponse)
def state():
    snap = controller.sink.snapshot()
    review = snap["review"]
    return StateResponse(
        review=ReviewResponse(text=review.text) if review else None,
        results={
            kind.value: AnalysisResponse.from_interpretation(result)
            for kind, result in snap["results"].items()
        },
        error=snap["error"],
        busy=snap["busy"],
    )

if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

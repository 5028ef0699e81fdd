from pydantic import BaseModel
from typing import Dict, Optional

from .outcomes import AnalysisKind, Category, Interpretation


class AnalysisRequest(BaseModel):
    api_token: Optional[str] = None # falls back to HF_API_TOKEN


class ReviewResponse(BaseModel):
    text: str


class CorpusResponse(BaseModel):
    count: int


class AnalysisResponse(BaseModel):
    kind: AnalysisKind
    verdict: str
    category: Category
    message: str
    score: Optional[float] = None
    noun_count: Optional[int] = None
    heuristic: bool = False

    @classmethod
    def from_interpretation(cls, result: Interpretation) -> "AnalysisResponse":
        return cls(
            kind=result.kind,
            verdict=result.verdict.value,
            category=result.category,
            message=result.message,
            score=result.score,
            noun_count=result.noun_count,
            heuristic=result.heuristic,
        )


class StateResponse(BaseModel):
    review: Optional[ReviewResponse] = None
    results: Dict[str, AnalysisResponse] = {}
    error: Optional[str] = None
    busy: bool = False

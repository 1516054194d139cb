from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Literal, List, Dict, Any

from .resume import ResumeData


class ScoreDetails(BaseModel):
    format_score: int
    content_score: float
    skills_score: int
    keyword_score: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ScoreResult(BaseModel):
    ats_score: int = Field(ge=0, le=100)
    issues: List[str]
    recommendations: List[str]
    details: ScoreDetails

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class OptimizationSuggestion(BaseModel):
    level: Literal["error", "warning", "info"]
    msg: str

    model_config = ConfigDict(frozen=True)


# For POST /api/ats/score and /api/ats/optimize
class ScoreRequest(BaseModel):
    data: ResumeData

    def content(self) -> Dict[str, Any]:
        return self.data.as_content()


class OptimizationResponse(BaseModel):
    suggestions: List[OptimizationSuggestion]

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import models, schemas
from ..deps import get_db, get_current_user
from ...services.analysis import ats_scorer
from .resumes import get_owned_resume

router = APIRouter()

@router.post("/ats/score", response_model=schemas.score.ScoreResult)
def score_content_endpoint(
    request: schemas.score.ScoreRequest,
    current_user: models.user.User = Depends(get_current_user),
):
    """
    Score resume content without saving anything.
    """
    return ats_scorer.compute_score(request.content())


@router.post("/ats/optimize", response_model=schemas.score.OptimizationResponse)
def optimize_content_endpoint(
    request: schemas.score.ScoreRequest,
    current_user: models.user.User = Depends(get_current_user),
):
    return {"suggestions": ats_scorer.get_optimizations(request.content())}


@router.post("/resumes/{resume_id}/score", response_model=schemas.score.ScoreResult)
def score_resume_endpoint(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
):
    """
    Score a stored resume and cache the result on it.
    """
    resume = get_owned_resume(db, resume_id, current_user)

    result = ats_scorer.compute_score(resume.data)

    resume.scores = result.model_dump(by_alias=True)
    db.commit()

    return result

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ... import models, schemas
from ...errors import NotFoundError
from ..deps import get_db, get_current_user

router = APIRouter()


def get_owned_resume(db: Session, resume_id: int, owner: models.user.User) -> models.resume.Resume:
    """
    Fetch a resume by id, treating someone else's resume exactly like a missing one.
    """
    resume = db.query(models.resume.Resume).filter(
        models.resume.Resume.id == resume_id,
        models.resume.Resume.user_id == owner.id
    ).first()
    if not resume:
        raise NotFoundError("Resume not found")
    return resume


@router.post("", response_model=schemas.resume.Resume, status_code=status.HTTP_201_CREATED)
def create_resume_endpoint(
    request: schemas.resume.ResumeCreate,
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
):
    resume = models.resume.Resume(
        user_id=current_user.id,
        title=request.title or "My Resume",
        data=request.data.as_content(),
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


@router.get("", response_model=List[schemas.resume.Resume])
def get_user_resumes_endpoint(
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
):
    """
    Get all resumes for the currently authenticated user, newest first.
    """
    resumes = db.query(models.resume.Resume).filter(
        models.resume.Resume.user_id == current_user.id
    ).order_by(models.resume.Resume.created_at.desc(), models.resume.Resume.id.desc()).all()

    return resumes


@router.get("/{resume_id}", response_model=schemas.resume.Resume)
def get_resume_endpoint(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
):
    return get_owned_resume(db, resume_id, current_user)


@router.put("/{resume_id}", response_model=schemas.resume.Resume)
def update_resume_endpoint(
    resume_id: int,
    request: schemas.resume.ResumeUpdate,
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
):
    """
    Replace the title and/or content. Omitted fields keep their stored value.
    """
    resume = get_owned_resume(db, resume_id, current_user)

    if request.title:
        resume.title = request.title
    if request.data is not None:
        resume.data = request.data.as_content()

    db.commit()
    db.refresh(resume)
    return resume


@router.delete("/{resume_id}")
def delete_resume_endpoint(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: models.user.User = Depends(get_current_user),
):
    resume = get_owned_resume(db, resume_id, current_user)
    db.delete(resume)
    db.commit()
    return {"message": "Resume deleted successfully"}

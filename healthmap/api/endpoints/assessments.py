from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from healthmap.api import deps
from healthmap.schemas.assessment import AssessmentDetail, AssessmentSummary
from healthmap.services.assessment_service import AssessmentService

router = APIRouter()


@router.get("", response_model=List[AssessmentSummary])
def list_assessments(db: Session = Depends(deps.get_db)) -> Any:
    """Active assessments available to start."""
    return AssessmentService(db).list_active_assessments()


@router.get("/{assessment_id}", response_model=AssessmentDetail)
def get_assessment(assessment_id: str, db: Session = Depends(deps.get_db)) -> Any:
    assessment = AssessmentService(db).get_assessment_definition(assessment_id)
    if not assessment:
        raise HTTPException(status_code=404, detail="Assessment not found")
    return assessment

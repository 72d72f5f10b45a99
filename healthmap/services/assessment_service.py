from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from healthmap import crud
from healthmap.core.exceptions import AssessmentError
from healthmap.models.assessment import (
    Assessment,
    AssessmentQuestion,
    AssessmentResult,
    QuestionOption,
    UserAssessment,
    UserResponse,
    STATUS_ABANDONED,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
)
from healthmap.utils.timezone import utcnow

logger = logging.getLogger(__name__)

# Upper bounds (exclusive) of the percentage bands
LEVEL_THRESHOLDS = (
    (40, "low"),
    (70, "medium"),
)
LEVEL_HIGH = "high"

LEVEL_INTERPRETATIONS = {
    "low": "This area needs attention.",
    "medium": "This area is on track with room to improve.",
    "high": "This area is a strength.",
}


def score_level(percentage: int) -> str:
    for upper, level in LEVEL_THRESHOLDS:
        if percentage < upper:
            return level
    return LEVEL_HIGH


@dataclass
class DimensionTally:
    score: int = 0
    max_score: int = 0

    @property
    def percentage(self) -> int:
        if self.max_score <= 0:
            return 0
        return round(100 * self.score / self.max_score)


class AssessmentService:
    def __init__(self, db: Session):
        self.db = db

    # Catalog
    def list_active_assessments(self) -> List[Assessment]:
        return crud.assessment.get_active(self.db)

    def get_assessment_definition(self, assessment_id: str) -> Optional[Assessment]:
        """Active assessment with its ordered dimensions, questions and options."""
        assessment = crud.assessment.get_definition(self.db, id=assessment_id)
        if not assessment or not assessment.is_active:
            return None
        return assessment

    # Attempt lifecycle
    def start_assessment(
        self,
        user_id: str,
        assessment_id: str,
        tracking_code: Optional[str] = None,
    ) -> UserAssessment:
        assessment = crud.assessment.get(self.db, id=assessment_id)
        if not assessment or not assessment.is_active:
            raise AssessmentError("Assessment not found or inactive")

        organization = None
        if tracking_code:
            organization = crud.organization_tracking.get_by_tracking_code(self.db, tracking_code=tracking_code)
            if not organization or not organization.is_active:
                raise AssessmentError("Invalid tracking code")
            if organization.assessment_id != assessment_id:
                raise AssessmentError("Tracking code is not valid for this assessment")
            organization.total_participants = (organization.total_participants or 0) + 1

        user_assessment = UserAssessment(
            user_id=user_id,
            assessment_id=assessment_id,
            organization_tracking_id=organization.id if organization else None,
            status=STATUS_IN_PROGRESS,
            percentage_complete=0,
        )
        self.db.add(user_assessment)
        self.db.commit()
        self.db.refresh(user_assessment)
        logger.info(f"User {user_id} started assessment {assessment_id} ({user_assessment.id})")
        return user_assessment

    def record_response(
        self,
        user_assessment_id: str,
        question_id: str,
        option_id: Optional[str] = None,
        response_value: Optional[int] = None,
        response_text: Optional[str] = None,
    ) -> UserResponse:
        """Store (or replace) the answer to one question and refresh progress."""
        user_assessment = self._get_in_progress(user_assessment_id)

        question = self.db.get(AssessmentQuestion, question_id)
        if not question or question.assessment_id != user_assessment.assessment_id:
            raise AssessmentError("Question does not belong to this assessment")

        option = None
        if option_id:
            option = self.db.get(QuestionOption, option_id)
            if not option or option.question_id != question.id:
                raise AssessmentError("Option does not belong to this question")
            if response_value is None:
                response_value = option.option_value

        if option is None and response_value is None and not response_text:
            raise AssessmentError("A response requires an option, a value or text")

        response = crud.user_assessment.get_response(
            self.db, user_assessment_id=user_assessment.id, question_id=question.id
        )
        if response is None:
            response = UserResponse(user_assessment_id=user_assessment.id, question_id=question.id)
            self.db.add(response)
        response.option_id = option.id if option else None
        response.response_value = response_value
        response.response_text = response_text
        self.db.flush()

        user_assessment.percentage_complete = self._progress(user_assessment)
        self.db.commit()
        self.db.refresh(response)
        return response

    def complete_assessment(self, user_assessment_id: str) -> UserAssessment:
        """Score every dimension and mark the attempt completed."""
        user_assessment = self._get_in_progress(user_assessment_id)
        assessment = crud.assessment.get_definition(self.db, id=user_assessment.assessment_id)

        rows = (
            self.db.query(UserResponse)
            .filter(UserResponse.user_assessment_id == user_assessment.id)
            .all()
        )
        responses: Dict[str, UserResponse] = {r.question_id: r for r in rows}
        missing = [q.id for q in assessment.questions if q.is_required and q.id not in responses]
        if missing:
            raise AssessmentError(f"{len(missing)} required question(s) have not been answered")

        tallies: Dict[str, DimensionTally] = {d.id: DimensionTally() for d in assessment.dimensions}
        total_score = 0
        for question in assessment.questions:
            response = responses.get(question.id)
            if response is None:
                continue
            weight = question.weight if question.weight is not None else 1
            value = response.response_value or 0
            total_score += value * weight
            if question.dimension_id not in tallies:
                continue
            tally = tallies[question.dimension_id]
            if question.options:
                best = max(option.option_value for option in question.options)
            else:
                best = value
            tally.score += value * weight
            tally.max_score += best * weight

        for dimension in assessment.dimensions:
            tally = tallies[dimension.id]
            level = score_level(tally.percentage)
            self.db.add(
                AssessmentResult(
                    user_assessment_id=user_assessment.id,
                    dimension_id=dimension.id,
                    score=tally.score,
                    percentage_score=tally.percentage,
                    level=level,
                    interpretation=f"{dimension.name}: {LEVEL_INTERPRETATIONS[level]}",
                )
            )

        user_assessment.total_score = total_score
        user_assessment.status = STATUS_COMPLETED
        user_assessment.completed_at = utcnow()
        user_assessment.percentage_complete = 100
        if user_assessment.organization_tracking is not None:
            organization = user_assessment.organization_tracking
            organization.completed_assessments = (organization.completed_assessments or 0) + 1

        self.db.commit()
        self.db.refresh(user_assessment)
        logger.info(f"Completed user assessment {user_assessment.id} with total score {total_score}")
        return user_assessment

    def abandon_assessment(self, user_assessment_id: str) -> UserAssessment:
        user_assessment = self._get_in_progress(user_assessment_id)
        user_assessment.status = STATUS_ABANDONED
        self.db.commit()
        self.db.refresh(user_assessment)
        return user_assessment

    # Helpers
    def _get_in_progress(self, user_assessment_id: str) -> UserAssessment:
        user_assessment = crud.user_assessment.get(self.db, id=user_assessment_id)
        if not user_assessment:
            raise AssessmentError("User assessment not found")
        if user_assessment.status != STATUS_IN_PROGRESS:
            raise AssessmentError(f"User assessment is {user_assessment.status}")
        return user_assessment

    def _progress(self, user_assessment: UserAssessment) -> int:
        total = (
            self.db.query(AssessmentQuestion)
            .filter(AssessmentQuestion.assessment_id == user_assessment.assessment_id)
            .count()
        )
        if total == 0:
            return 0
        answered = (
            self.db.query(UserResponse.question_id)
            .filter(UserResponse.user_assessment_id == user_assessment.id)
            .distinct()
            .count()
        )
        return answered * 100 // total

from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from healthmap.core.exceptions import OptionInUseError
from healthmap.crud.base import CRUDBase
from healthmap.models.assessment import (
    Assessment,
    AssessmentQuestion,
    QuestionOption,
    UserAssessment,
    UserResponse,
)


class CRUDAssessment(CRUDBase[Assessment, Assessment, Assessment]):
    def get_active(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Assessment]:
        return (
            db.query(Assessment)
            .filter(Assessment.is_active.is_(True))
            .order_by(Assessment.name)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_definition(self, db: Session, *, id: str) -> Optional[Assessment]:
        """Assessment with dimensions, questions and options loaded in display order."""
        return (
            db.query(Assessment)
            .options(
                selectinload(Assessment.dimensions),
                selectinload(Assessment.questions).selectinload(AssessmentQuestion.options),
            )
            .filter(Assessment.id == id)
            .first()
        )


class CRUDQuestionOption(CRUDBase[QuestionOption, QuestionOption, QuestionOption]):
    def is_answered(self, db: Session, *, option_id: str) -> bool:
        return (
            db.query(UserResponse.id)
            .filter(UserResponse.option_id == option_id)
            .first()
            is not None
        )

    def update_option_value(self, db: Session, *, db_obj: QuestionOption, option_value: int) -> QuestionOption:
        if db_obj.option_value == option_value:
            return db_obj
        if self.is_answered(db, option_id=db_obj.id):
            raise OptionInUseError(
                "Option scoring value cannot change after responses have been recorded"
            )
        return self.update(db, db_obj=db_obj, obj_in={"option_value": option_value})


class CRUDUserAssessment(CRUDBase[UserAssessment, UserAssessment, UserAssessment]):
    def get_for_user(self, db: Session, *, user_id: str, status: Optional[str] = None) -> List[UserAssessment]:
        query = db.query(UserAssessment).filter(UserAssessment.user_id == user_id)
        if status:
            query = query.filter(UserAssessment.status == status)
        return query.order_by(UserAssessment.started_at.desc()).all()

    def get_response(self, db: Session, *, user_assessment_id: str, question_id: str) -> Optional[UserResponse]:
        return (
            db.query(UserResponse)
            .filter(
                UserResponse.user_assessment_id == user_assessment_id,
                UserResponse.question_id == question_id,
            )
            .first()
        )


assessment = CRUDAssessment(Assessment)
question_option = CRUDQuestionOption(QuestionOption)
user_assessment = CRUDUserAssessment(UserAssessment)

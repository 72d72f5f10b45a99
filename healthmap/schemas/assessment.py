from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class QuestionOption(BaseModel):
    id: str
    option_text: str
    option_value: int
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class AssessmentQuestion(BaseModel):
    id: str
    dimension_id: Optional[str] = None
    question_text: str
    question_type: str
    display_order: int
    is_required: bool
    weight: Optional[int] = 1
    options: List[QuestionOption] = []

    model_config = ConfigDict(from_attributes=True)


class HealthDimension(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    display_order: int
    color: Optional[str] = None
    icon: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AssessmentSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    version: str
    free_results_limit: Optional[int] = None
    paid_report_price: Optional[int] = None
    estimated_duration: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class AssessmentDetail(AssessmentSummary):
    dimensions: List[HealthDimension] = []
    questions: List[AssessmentQuestion] = []

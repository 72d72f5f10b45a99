from .user import (
    RegisterRequest,
    RegisterResponse,
    ErrorResponse,
    UserCreate,
    ProfileCreate,
    User,
)
from .assessment import AssessmentSummary, AssessmentDetail

from .user import User, Profile
from .assessment import (
    Assessment,
    HealthDimension,
    AssessmentQuestion,
    QuestionOption,
    UserAssessment,
    UserResponse,
    AssessmentResult,
)
from .commerce import (
    Report,
    Purchase,
    DiscountCode,
    OrganizationTracking,
)
from .billing import (
    StripeCustomer,
    ReportPackage,
    StripePayment,
    PackagePurchase,
    PurchasedReport,
    OrganizationInvite,
)

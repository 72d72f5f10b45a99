# Import all the models, so that Base has them before being
# imported by Alembic or used by create_all
from healthmap.db.base_class import Base  # noqa
from healthmap.models import (  # noqa
    User,
    Profile,
    Assessment,
    HealthDimension,
    AssessmentQuestion,
    QuestionOption,
    UserAssessment,
    UserResponse,
    AssessmentResult,
    Report,
    Purchase,
    DiscountCode,
    OrganizationTracking,
    StripeCustomer,
    ReportPackage,
    StripePayment,
    PackagePurchase,
    PurchasedReport,
    OrganizationInvite,
)

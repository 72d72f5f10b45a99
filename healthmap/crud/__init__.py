from .user import user, profile
from .assessment import assessment, question_option, user_assessment
from .commerce import discount_code, organization_tracking, purchase, report_package, package_purchase

__all__ = [
    "user", "profile", "assessment", "question_option", "user_assessment",
    "discount_code", "organization_tracking", "purchase", "report_package", "package_purchase",
]

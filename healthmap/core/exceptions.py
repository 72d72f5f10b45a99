"""Domain errors raised by the service layer and mapped to 400 responses."""


class AssessmentError(ValueError):
    """An assessment attempt operation violates the questionnaire rules."""


class OptionInUseError(AssessmentError):
    """A question option's scoring value cannot change once it has been answered."""


class CommerceError(ValueError):
    """A purchase, discount or package entitlement operation is not allowed."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import relationship

from healthmap.db.base_class import Base, generate_id
from healthmap.utils.timezone import utcnow


QUESTION_TYPES = ("multiple_choice", "scale", "boolean")

STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUS_ABANDONED = "abandoned"
USER_ASSESSMENT_STATUSES = (STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_ABANDONED)


class Assessment(Base):
    """A named, versioned questionnaire definition."""
    __tablename__ = "assessment"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    version = Column(String(32), nullable=False, default="1.0")
    is_active = Column(Boolean, nullable=False, default=True)
    free_results_limit = Column(Integer, default=3)  # Number of free insights
    paid_report_price = Column(Integer, nullable=True)  # Price in cents
    estimated_duration = Column(Integer, nullable=True)  # Duration in minutes
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    dimensions = relationship(
        "HealthDimension",
        back_populates="assessment",
        order_by="HealthDimension.display_order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    questions = relationship(
        "AssessmentQuestion",
        back_populates="assessment",
        order_by="AssessmentQuestion.display_order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    user_assessments = relationship("UserAssessment", back_populates="assessment", passive_deletes=True)
    organization_tracking = relationship("OrganizationTracking", back_populates="assessment", passive_deletes=True)


class HealthDimension(Base):
    """A scoring axis within an assessment."""
    __tablename__ = "health_dimension"

    id = Column(String(32), primary_key=True, default=generate_id)
    assessment_id = Column(String(32), ForeignKey("assessment.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False)
    color = Column(String(32), nullable=True)  # For visual representation
    icon = Column(String(64), nullable=True)  # Icon identifier
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    assessment = relationship("Assessment", back_populates="dimensions")
    questions = relationship("AssessmentQuestion", back_populates="dimension", passive_deletes=True)
    results = relationship("AssessmentResult", back_populates="dimension", passive_deletes=True)


class AssessmentQuestion(Base):
    __tablename__ = "assessment_question"

    id = Column(String(32), primary_key=True, default=generate_id)
    assessment_id = Column(String(32), ForeignKey("assessment.id", ondelete="CASCADE"), nullable=False, index=True)
    dimension_id = Column(String(32), ForeignKey("health_dimension.id", ondelete="SET NULL"), nullable=True)
    question_text = Column(Text, nullable=False)
    question_type = Column(String(32), nullable=False)  # multiple_choice, scale, boolean
    display_order = Column(Integer, nullable=False)
    is_required = Column(Boolean, nullable=False, default=True)
    weight = Column(Integer, default=1)  # Question importance weight
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    assessment = relationship("Assessment", back_populates="questions")
    dimension = relationship("HealthDimension", back_populates="questions")
    options = relationship(
        "QuestionOption",
        back_populates="question",
        order_by="QuestionOption.display_order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    responses = relationship("UserResponse", back_populates="question", passive_deletes=True)


class QuestionOption(Base):
    __tablename__ = "question_option"

    id = Column(String(32), primary_key=True, default=generate_id)
    question_id = Column(String(32), ForeignKey("assessment_question.id", ondelete="CASCADE"), nullable=False, index=True)
    option_text = Column(String, nullable=False)
    option_value = Column(Integer, nullable=False)  # Numeric value for scoring
    display_order = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    question = relationship("AssessmentQuestion", back_populates="options")
    responses = relationship("UserResponse", back_populates="option", passive_deletes=True)


class UserAssessment(Base):
    """One user's attempt at an assessment."""
    __tablename__ = "user_assessment"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    assessment_id = Column(String(32), ForeignKey("assessment.id", ondelete="CASCADE"), nullable=False)
    organization_tracking_id = Column(
        String(32),
        ForeignKey("organization_tracking.id", ondelete="SET NULL"),
        nullable=True,
    )
    status = Column(String(20), nullable=False, default=STATUS_IN_PROGRESS)  # in_progress, completed, abandoned
    started_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    total_score = Column(Integer, nullable=True)
    percentage_complete = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="user_assessments")
    assessment = relationship("Assessment", back_populates="user_assessments")
    organization_tracking = relationship("OrganizationTracking", back_populates="user_assessments")
    responses = relationship(
        "UserResponse",
        back_populates="user_assessment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    results = relationship(
        "AssessmentResult",
        back_populates="user_assessment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reports = relationship(
        "Report",
        back_populates="user_assessment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    purchases = relationship("Purchase", back_populates="user_assessment", passive_deletes=True)

    __table_args__ = (
        Index("idx_user_assessment_user_status", "user_id", "status"),
    )


class UserResponse(Base):
    __tablename__ = "user_response"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_assessment_id = Column(String(32), ForeignKey("user_assessment.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(32), ForeignKey("assessment_question.id", ondelete="CASCADE"), nullable=False)
    option_id = Column(String(32), ForeignKey("question_option.id", ondelete="SET NULL"), nullable=True)
    response_value = Column(Integer, nullable=True)  # For scale/numeric responses
    response_text = Column(Text, nullable=True)  # For text responses
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user_assessment = relationship("UserAssessment", back_populates="responses")
    question = relationship("AssessmentQuestion", back_populates="responses")
    option = relationship("QuestionOption", back_populates="responses")


class AssessmentResult(Base):
    """Computed score for one dimension of a completed attempt."""
    __tablename__ = "assessment_result"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_assessment_id = Column(String(32), ForeignKey("user_assessment.id", ondelete="CASCADE"), nullable=False, index=True)
    dimension_id = Column(String(32), ForeignKey("health_dimension.id", ondelete="CASCADE"), nullable=False)
    score = Column(Integer, nullable=False)
    percentage_score = Column(Integer, nullable=False)
    level = Column(String(20), nullable=True)  # low, medium, high
    interpretation = Column(Text, nullable=True)
    recommendations = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user_assessment = relationship("UserAssessment", back_populates="results")
    dimension = relationship("HealthDimension", back_populates="results")

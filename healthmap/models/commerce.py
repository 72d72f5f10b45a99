from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from healthmap.db.base_class import Base, generate_id
from healthmap.utils.timezone import utcnow


REPORT_TYPES = ("free", "paid", "organizational")
PAYMENT_STATUSES = ("pending", "completed", "failed", "refunded")
DISCOUNT_TYPES = ("percentage", "fixed")


class Report(Base):
    __tablename__ = "report"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_assessment_id = Column(String(32), ForeignKey("user_assessment.id", ondelete="CASCADE"), nullable=False, index=True)
    report_type = Column(String(20), nullable=False)  # free, paid, organizational
    report_data = Column(Text, nullable=False)  # JSON string with full report data
    report_url = Column(String, nullable=True)  # URL to generated PDF report
    is_generated = Column(Boolean, nullable=False, default=False)
    generated_at = Column(DateTime(timezone=True), nullable=True)
    delivery_method = Column(String(20), nullable=True)  # email, whatsapp, download
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user_assessment = relationship("UserAssessment", back_populates="reports")


class Purchase(Base):
    __tablename__ = "purchase"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    user_assessment_id = Column(String(32), ForeignKey("user_assessment.id", ondelete="SET NULL"), nullable=True)
    discount_code_id = Column(String(32), ForeignKey("discount_code.id", ondelete="SET NULL"), nullable=True)
    product_type = Column(String(50), nullable=False)  # full_report, organizational_package
    original_price = Column(Integer, nullable=False)  # Price in cents
    discount_amount = Column(Integer, default=0)
    final_price = Column(Integer, nullable=False)
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, completed, failed, refunded
    payment_provider = Column(String(50), nullable=True)  # stripe, paypal, etc.
    payment_id = Column(String, nullable=True)  # External payment reference
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="purchases")
    user_assessment = relationship("UserAssessment", back_populates="purchases")
    discount_code = relationship("DiscountCode", back_populates="purchases")


class DiscountCode(Base):
    __tablename__ = "discount_code"

    id = Column(String(32), primary_key=True, default=generate_id)
    code = Column(String(64), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    discount_type = Column(String(20), nullable=False)  # percentage, fixed
    discount_value = Column(Integer, nullable=False)  # Percentage or cents
    max_uses = Column(Integer, nullable=True)  # Null for unlimited
    current_uses = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    valid_from = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=True)
    applicable_products = Column(Text, nullable=True)  # JSON array of product types
    created_by = Column(String(32), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    creator = relationship("User", back_populates="created_discount_codes")
    purchases = relationship("Purchase", back_populates="discount_code", passive_deletes=True)
    package_purchases = relationship("PackagePurchase", back_populates="discount_code", passive_deletes=True)


class OrganizationTracking(Base):
    """Employer-issued tracking code attributing completions to an organization."""
    __tablename__ = "organization_tracking"

    id = Column(String(32), primary_key=True, default=generate_id)
    organization_name = Column(String, nullable=False)
    contact_email = Column(String, nullable=False)
    contact_name = Column(String, nullable=True)
    assessment_id = Column(String(32), ForeignKey("assessment.id", ondelete="CASCADE"), nullable=False)
    tracking_code = Column(String(64), unique=True, index=True, nullable=False)  # Unique code for employees
    is_active = Column(Boolean, nullable=False, default=True)
    total_participants = Column(Integer, default=0)
    completed_assessments = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    assessment = relationship("Assessment", back_populates="organization_tracking")
    user_assessments = relationship("UserAssessment", back_populates="organization_tracking", passive_deletes=True)
    invites = relationship(
        "OrganizationInvite",
        back_populates="organization_tracking",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

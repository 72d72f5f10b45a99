from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from healthmap.db.base_class import Base, generate_id
from healthmap.utils.timezone import utcnow


# reports_remaining / total_reports value for packages without a report cap
UNLIMITED_REPORTS = -1

PACKAGE_STATUS_ACTIVE = "active"
PACKAGE_STATUS_EXPIRED = "expired"
PACKAGE_STATUS_EXHAUSTED = "exhausted"
PACKAGE_STATUS_REFUNDED = "refunded"


class StripeCustomer(Base):
    __tablename__ = "stripe_customer"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("user.id", ondelete="CASCADE"), nullable=True)
    organization_tracking_id = Column(
        String(32),
        ForeignKey("organization_tracking.id", ondelete="CASCADE"),
        nullable=True,
    )
    stripe_customer_id = Column(String, unique=True, nullable=False)
    email = Column(String, nullable=False)
    name = Column(String, nullable=True)
    customer_type = Column(String(20), nullable=False)  # individual, organization
    default_payment_method_id = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User")
    organization_tracking = relationship("OrganizationTracking")
    payments = relationship(
        "StripePayment",
        back_populates="stripe_customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    package_purchases = relationship(
        "PackagePurchase",
        back_populates="stripe_customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ReportPackage(Base):
    __tablename__ = "report_package"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    package_type = Column(String(20), nullable=False)  # single, bulk, organizational, unlimited
    report_count = Column(Integer, nullable=True)  # Null for unlimited
    price_per_report = Column(Integer, nullable=True)  # Price per report in cents
    total_price = Column(Integer, nullable=False)  # Total package price in cents
    discount_percentage = Column(Integer, default=0)
    validity_days = Column(Integer, nullable=True)  # Null for lifetime
    is_active = Column(Boolean, nullable=False, default=True)
    target_customer_type = Column(String(20), nullable=False)  # individual, organization, both
    stripe_price_id = Column(String, nullable=True)
    features = Column(Text, nullable=True)  # JSON array of package features
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    package_purchases = relationship("PackagePurchase", back_populates="report_package", passive_deletes=True)


class StripePayment(Base):
    __tablename__ = "stripe_payment"

    id = Column(String(32), primary_key=True, default=generate_id)
    stripe_customer_id = Column(String(32), ForeignKey("stripe_customer.id", ondelete="CASCADE"), nullable=False)
    stripe_payment_intent_id = Column(String, unique=True, nullable=False)
    stripe_charge_id = Column(String, nullable=True)
    amount = Column(Integer, nullable=False)  # Amount in cents
    currency = Column(String(3), nullable=False, default="usd")
    payment_status = Column(String(20), nullable=False)  # pending, succeeded, failed, canceled, refunded
    payment_method = Column(String(50), nullable=True)  # card, bank_transfer, etc.
    payment_method_id = Column(String, nullable=True)
    receipt_url = Column(String, nullable=True)
    failure_reason = Column(Text, nullable=True)
    refund_amount = Column(Integer, default=0)
    refund_reason = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    metadata_json = Column("metadata", Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    stripe_customer = relationship("StripeCustomer", back_populates="payments")
    package_purchases = relationship("PackagePurchase", back_populates="stripe_payment", passive_deletes=True)


class PackagePurchase(Base):
    """Entitlement to a bounded or unlimited number of reports."""
    __tablename__ = "package_purchase"

    id = Column(String(32), primary_key=True, default=generate_id)
    stripe_customer_id = Column(String(32), ForeignKey("stripe_customer.id", ondelete="CASCADE"), nullable=False)
    report_package_id = Column(String(32), ForeignKey("report_package.id", ondelete="CASCADE"), nullable=False)
    stripe_payment_id = Column(String(32), ForeignKey("stripe_payment.id", ondelete="SET NULL"), nullable=True)
    discount_code_id = Column(String(32), ForeignKey("discount_code.id", ondelete="SET NULL"), nullable=True)
    original_price = Column(Integer, nullable=False)
    discount_amount = Column(Integer, default=0)
    final_price = Column(Integer, nullable=False)
    reports_remaining = Column(Integer, nullable=False)
    total_reports = Column(Integer, nullable=False)
    purchase_status = Column(String(20), nullable=False, default=PACKAGE_STATUS_ACTIVE)  # active, expired, exhausted, refunded
    expires_at = Column(DateTime(timezone=True), nullable=True)
    purchased_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    stripe_customer = relationship("StripeCustomer", back_populates="package_purchases")
    report_package = relationship("ReportPackage", back_populates="package_purchases")
    stripe_payment = relationship("StripePayment", back_populates="package_purchases")
    discount_code = relationship("DiscountCode", back_populates="package_purchases")
    purchased_reports = relationship(
        "PurchasedReport",
        back_populates="package_purchase",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    invites = relationship("OrganizationInvite", back_populates="package_purchase", passive_deletes=True)

    @property
    def is_unlimited(self) -> bool:
        return self.total_reports == UNLIMITED_REPORTS


class PurchasedReport(Base):
    __tablename__ = "purchased_report"

    id = Column(String(32), primary_key=True, default=generate_id)
    package_purchase_id = Column(String(32), ForeignKey("package_purchase.id", ondelete="CASCADE"), nullable=False, index=True)
    user_assessment_id = Column(String(32), ForeignKey("user_assessment.id", ondelete="CASCADE"), nullable=False)
    report_id = Column(String(32), ForeignKey("report.id", ondelete="SET NULL"), nullable=True)
    report_status = Column(String(20), nullable=False, default="pending")  # pending, generated, delivered, failed
    assigned_to = Column(String, nullable=True)  # Email or user ID for organizational purchases
    assigned_by = Column(String(32), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    generated_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    package_purchase = relationship("PackagePurchase", back_populates="purchased_reports")
    user_assessment = relationship("UserAssessment")
    report = relationship("Report")
    assigner = relationship("User", foreign_keys=[assigned_by])


class OrganizationInvite(Base):
    __tablename__ = "organization_invite"

    id = Column(String(32), primary_key=True, default=generate_id)
    organization_tracking_id = Column(
        String(32),
        ForeignKey("organization_tracking.id", ondelete="CASCADE"),
        nullable=False,
    )
    package_purchase_id = Column(String(32), ForeignKey("package_purchase.id", ondelete="CASCADE"), nullable=True)
    invite_code = Column(String(64), unique=True, nullable=False)
    email = Column(String, nullable=False)
    invited_by = Column(String(32), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    invite_status = Column(String(20), nullable=False, default="pending")  # pending, accepted, expired
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    accepted_by = Column(String(32), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    organization_tracking = relationship("OrganizationTracking", back_populates="invites")
    package_purchase = relationship("PackagePurchase", back_populates="invites")
    inviter = relationship("User", foreign_keys=[invited_by])
    acceptor = relationship("User", foreign_keys=[accepted_by])

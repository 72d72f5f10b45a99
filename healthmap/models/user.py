from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from healthmap.db.base_class import Base, generate_id
from healthmap.utils.timezone import utcnow

class User(Base):
    __tablename__ = "user"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    email_verified = Column(DateTime(timezone=True), nullable=True)
    image = Column(String, nullable=True)
    password = Column(String, nullable=True)  # bcrypt hash
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    profile = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    user_assessments = relationship(
        "UserAssessment",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    purchases = relationship(
        "Purchase",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    created_discount_codes = relationship("DiscountCode", back_populates="creator", passive_deletes=True)

    def __repr__(self):
        return f"<User {self.email}>"


class Profile(Base):
    __tablename__ = "profile"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(
        String(32),
        ForeignKey("user.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    date_of_birth = Column(DateTime, nullable=True)
    gender = Column(String, nullable=True)
    height = Column(Integer, nullable=True)  # in cm
    weight = Column(Integer, nullable=True)  # in kg
    activity_level = Column(String, nullable=True)
    medical_conditions = Column(Text, nullable=True)
    allergies = Column(Text, nullable=True)
    medications = Column(Text, nullable=True)
    emergency_contact_name = Column(String, nullable=True)
    emergency_contact_phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<Profile user_id={self.user_id}>"

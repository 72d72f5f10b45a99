import os

# Settings are read at import time; point them at a throwaway database first
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from healthmap.api import deps
from healthmap.db.base import Base
from healthmap.db.session import enable_sqlite_foreign_keys
from healthmap.main import app
from healthmap.models.assessment import (
    Assessment,
    AssessmentQuestion,
    HealthDimension,
    QuestionOption,
)


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sleep_assessment(db):
    """Two dimensions, three questions (one optional, one unscored)."""
    assessment = Assessment(
        name="Sleep & Energy",
        description="How rested are you?",
        version="1.0",
        estimated_duration=5,
        paid_report_price=1999,
    )
    db.add(assessment)
    db.flush()

    sleep = HealthDimension(assessment_id=assessment.id, name="Sleep", display_order=1, color="#3366ff")
    energy = HealthDimension(assessment_id=assessment.id, name="Energy", display_order=2)
    db.add_all([sleep, energy])
    db.flush()

    q_hours = AssessmentQuestion(
        assessment_id=assessment.id,
        dimension_id=sleep.id,
        question_text="How many hours do you sleep?",
        question_type="multiple_choice",
        display_order=1,
        weight=2,
    )
    q_energy = AssessmentQuestion(
        assessment_id=assessment.id,
        dimension_id=energy.id,
        question_text="Rate your energy in the afternoon",
        question_type="scale",
        display_order=2,
    )
    q_notes = AssessmentQuestion(
        assessment_id=assessment.id,
        question_text="Anything else?",
        question_type="boolean",
        display_order=3,
        is_required=False,
    )
    db.add_all([q_hours, q_energy, q_notes])
    db.flush()

    db.add_all([
        QuestionOption(question_id=q_hours.id, option_text="Under 5", option_value=0, display_order=1),
        QuestionOption(question_id=q_hours.id, option_text="5-7", option_value=2, display_order=2),
        QuestionOption(question_id=q_hours.id, option_text="7+", option_value=4, display_order=3),
        QuestionOption(question_id=q_energy.id, option_text="Low", option_value=1, display_order=1),
        QuestionOption(question_id=q_energy.id, option_text="High", option_value=5, display_order=2),
        QuestionOption(question_id=q_notes.id, option_text="Yes", option_value=1, display_order=1),
        QuestionOption(question_id=q_notes.id, option_text="No", option_value=0, display_order=2),
    ])
    db.commit()
    db.refresh(assessment)
    return assessment

#!/usr/bin/env python3
"""
Health Map Database Setup Script
================================

Creates the tables for local development and optionally loads a sample
assessment so the catalog endpoints have something to return.
Deployed databases are managed with `alembic upgrade head` instead.

Usage:
    python scripts/setup_database.py [--check-only] [--seed]
"""

import sys
import logging
import argparse
from sqlalchemy import inspect

from healthmap.core.database_utils import check_database_connection, create_all_tables, get_db_session
from healthmap.db.base import Base
from healthmap.db.session import engine
from healthmap.models.assessment import Assessment, AssessmentQuestion, HealthDimension, QuestionOption

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

SAMPLE_ASSESSMENT = "Everyday Wellbeing Check"

# dimension name -> list of (question text, [(option text, value), ...])
SAMPLE_QUESTIONS = {
    "Sleep": [
        ("How many hours do you usually sleep?", [("Less than 5", 0), ("5 to 7", 2), ("7 or more", 4)]),
        ("How often do you wake up rested?", [("Rarely", 0), ("Sometimes", 2), ("Usually", 4)]),
    ],
    "Activity": [
        ("How many days a week are you active for 30 minutes?", [("0-1", 0), ("2-4", 2), ("5+", 4)]),
    ],
    "Stress": [
        ("How often do you feel overwhelmed?", [("Often", 0), ("Sometimes", 2), ("Rarely", 4)]),
    ],
}


def check_tables_exist():
    """Check if all required tables exist"""
    try:
        existing_tables = inspect(engine).get_table_names()
        missing_tables = [name for name in Base.metadata.tables if name not in existing_tables]
        if missing_tables:
            logger.warning(f"⚠️ Missing tables: {missing_tables}")
            return False
        logger.info(f"✅ All {len(Base.metadata.tables)} required tables exist")
        return True
    except Exception as e:
        logger.error(f"❌ Failed to check tables: {e}")
        return False


def seed_sample_assessment():
    """Insert the sample assessment unless it is already there"""
    with get_db_session() as db:
        if db.query(Assessment).filter(Assessment.name == SAMPLE_ASSESSMENT).first():
            logger.info("ℹ️ Sample assessment already exists")
            return

        assessment = Assessment(
            name=SAMPLE_ASSESSMENT,
            description="A short check-in across sleep, activity and stress.",
            estimated_duration=5,
            paid_report_price=1999,
        )
        db.add(assessment)
        db.flush()

        question_order = 0
        for dimension_order, (dimension_name, questions) in enumerate(SAMPLE_QUESTIONS.items(), start=1):
            dimension = HealthDimension(
                assessment_id=assessment.id,
                name=dimension_name,
                display_order=dimension_order,
            )
            db.add(dimension)
            db.flush()

            for question_text, options in questions:
                question_order += 1
                question = AssessmentQuestion(
                    assessment_id=assessment.id,
                    dimension_id=dimension.id,
                    question_text=question_text,
                    question_type="multiple_choice",
                    display_order=question_order,
                )
                db.add(question)
                db.flush()
                for option_order, (option_text, value) in enumerate(options, start=1):
                    db.add(QuestionOption(
                        question_id=question.id,
                        option_text=option_text,
                        option_value=value,
                        display_order=option_order,
                    ))

        logger.info(f"✅ Created sample assessment {assessment.id} with {question_order} questions")


def main():
    parser = argparse.ArgumentParser(description='Health Map Database Setup')
    parser.add_argument('--check-only', action='store_true',
                        help='Only check if tables exist, do not create')
    parser.add_argument('--seed', action='store_true',
                        help='Load the sample assessment after creating tables')
    args = parser.parse_args()

    if not check_database_connection():
        logger.error("❌ Cannot proceed without database connection")
        sys.exit(1)

    tables_exist = check_tables_exist()

    if args.check_only:
        sys.exit(0 if tables_exist else 1)

    if not tables_exist:
        create_all_tables()

    if args.seed:
        seed_sample_assessment()

    if not check_tables_exist():
        logger.error("❌ Setup verification failed")
        sys.exit(1)

    logger.info("🎉 Database setup completed")
    logger.info("Start the server with: uvicorn healthmap.main:app --reload")


if __name__ == "__main__":
    main()

"""
Tests for the assessment lifecycle: start, answer, complete and score.
"""

import pytest

from healthmap import crud
from healthmap.core.exceptions import AssessmentError, OptionInUseError
from healthmap.models.assessment import AssessmentResult, UserAssessment, UserResponse
from healthmap.models.commerce import OrganizationTracking
from healthmap.services import user_service
from healthmap.services.assessment_service import AssessmentService, DimensionTally, score_level


@pytest.fixture
def user(db):
    return user_service.create_user(db, email="ann@example.com", password="secret1", name="Ann").user


@pytest.fixture
def service(db):
    return AssessmentService(db)


def _questions(assessment):
    hours, energy, notes = assessment.questions
    return hours, energy, notes


def _option(question, text):
    return next(option for option in question.options if option.option_text == text)


class TestScoreLevel:
    @pytest.mark.parametrize("percentage,level", [
        (0, "low"),
        (39, "low"),
        (40, "medium"),
        (69, "medium"),
        (70, "high"),
        (100, "high"),
    ])
    def test_bands(self, percentage, level):
        assert score_level(percentage) == level

    def test_empty_tally_scores_zero(self):
        assert DimensionTally().percentage == 0

    def test_percentage_rounds(self):
        assert DimensionTally(score=2, max_score=3).percentage == 67


class TestCatalog:
    def test_lists_only_active_assessments(self, db, service, sleep_assessment):
        retired = crud.assessment.create(db, obj_in={"name": "Retired", "is_active": False})

        ids = [a.id for a in service.list_active_assessments()]

        assert sleep_assessment.id in ids
        assert retired.id not in ids

    def test_definition_is_ordered(self, service, sleep_assessment):
        definition = service.get_assessment_definition(sleep_assessment.id)

        assert [d.name for d in definition.dimensions] == ["Sleep", "Energy"]
        assert [q.display_order for q in definition.questions] == [1, 2, 3]
        assert [o.option_text for o in definition.questions[0].options] == ["Under 5", "5-7", "7+"]

    def test_inactive_definition_is_hidden(self, db, service, sleep_assessment):
        crud.assessment.update(db, db_obj=sleep_assessment, obj_in={"is_active": False})

        assert service.get_assessment_definition(sleep_assessment.id) is None

    def test_unknown_definition(self, service):
        assert service.get_assessment_definition("missing") is None


class TestStartAssessment:
    def test_starts_in_progress(self, service, user, sleep_assessment):
        attempt = service.start_assessment(user.id, sleep_assessment.id)

        assert attempt.status == "in_progress"
        assert attempt.percentage_complete == 0
        assert attempt.started_at is not None
        assert attempt.completed_at is None

    def test_rejects_inactive_assessment(self, db, service, user, sleep_assessment):
        crud.assessment.update(db, db_obj=sleep_assessment, obj_in={"is_active": False})

        with pytest.raises(AssessmentError):
            service.start_assessment(user.id, sleep_assessment.id)

    def test_tracking_code_attributes_attempt(self, db, service, user, sleep_assessment):
        org = OrganizationTracking(
            organization_name="Acme",
            contact_email="hr@acme.test",
            assessment_id=sleep_assessment.id,
            tracking_code="ACME-2024",
        )
        db.add(org)
        db.commit()

        attempt = service.start_assessment(user.id, sleep_assessment.id, tracking_code="ACME-2024")

        assert attempt.organization_tracking_id == org.id
        db.refresh(org)
        assert org.total_participants == 1

    def test_rejects_unknown_tracking_code(self, service, user, sleep_assessment):
        with pytest.raises(AssessmentError, match="Invalid tracking code"):
            service.start_assessment(user.id, sleep_assessment.id, tracking_code="NOPE")

    def test_attempts_listed_per_user_and_status(self, db, service, user, sleep_assessment):
        first = service.start_assessment(user.id, sleep_assessment.id)
        second = service.start_assessment(user.id, sleep_assessment.id)
        service.abandon_assessment(first.id)

        all_attempts = crud.user_assessment.get_for_user(db, user_id=user.id)
        in_progress = crud.user_assessment.get_for_user(db, user_id=user.id, status="in_progress")

        assert {a.id for a in all_attempts} == {first.id, second.id}
        assert [a.id for a in in_progress] == [second.id]


class TestRecordResponse:
    def test_option_value_becomes_response_value(self, service, user, sleep_assessment):
        hours, _, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)

        response = service.record_response(attempt.id, hours.id, option_id=_option(hours, "7+").id)

        assert response.response_value == 4

    def test_progress_tracks_answered_questions(self, db, service, user, sleep_assessment):
        hours, energy, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)

        service.record_response(attempt.id, hours.id, option_id=_option(hours, "5-7").id)
        assert db.get(UserAssessment, attempt.id).percentage_complete == 33

        service.record_response(attempt.id, energy.id, option_id=_option(energy, "High").id)
        assert db.get(UserAssessment, attempt.id).percentage_complete == 66

    def test_answering_again_replaces_response(self, db, service, user, sleep_assessment):
        hours, _, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)

        service.record_response(attempt.id, hours.id, option_id=_option(hours, "Under 5").id)
        service.record_response(attempt.id, hours.id, option_id=_option(hours, "7+").id)

        rows = db.query(UserResponse).filter(UserResponse.user_assessment_id == attempt.id).all()
        assert len(rows) == 1
        assert rows[0].response_value == 4

    def test_rejects_option_from_another_question(self, service, user, sleep_assessment):
        hours, energy, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)

        with pytest.raises(AssessmentError, match="Option does not belong"):
            service.record_response(attempt.id, hours.id, option_id=_option(energy, "High").id)

    def test_rejects_empty_response(self, service, user, sleep_assessment):
        hours, _, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)

        with pytest.raises(AssessmentError):
            service.record_response(attempt.id, hours.id)

    def test_rejects_answers_after_abandon(self, service, user, sleep_assessment):
        hours, _, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)
        service.abandon_assessment(attempt.id)

        with pytest.raises(AssessmentError, match="abandoned"):
            service.record_response(attempt.id, hours.id, response_value=2)


class TestCompleteAssessment:
    def test_scores_each_dimension(self, db, service, user, sleep_assessment):
        hours, energy, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)
        service.record_response(attempt.id, hours.id, option_id=_option(hours, "5-7").id)
        service.record_response(attempt.id, energy.id, option_id=_option(energy, "High").id)

        completed = service.complete_assessment(attempt.id)

        assert completed.status == "completed"
        assert completed.completed_at is not None
        assert completed.percentage_complete == 100
        # hours: 2 * weight 2, energy: 5 * weight 1
        assert completed.total_score == 9

        results = {
            r.dimension_id: r
            for r in db.query(AssessmentResult).filter(AssessmentResult.user_assessment_id == attempt.id)
        }
        sleep = results[hours.dimension_id]
        assert sleep.score == 4
        assert sleep.percentage_score == 50
        assert sleep.level == "medium"
        assert sleep.interpretation.startswith("Sleep:")
        energy_result = results[energy.dimension_id]
        assert energy_result.percentage_score == 100
        assert energy_result.level == "high"

    def test_optional_answer_counts_toward_total_only(self, db, service, user, sleep_assessment):
        hours, energy, notes = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)
        service.record_response(attempt.id, hours.id, option_id=_option(hours, "Under 5").id)
        service.record_response(attempt.id, energy.id, option_id=_option(energy, "Low").id)
        service.record_response(attempt.id, notes.id, option_id=_option(notes, "Yes").id)

        completed = service.complete_assessment(attempt.id)

        assert completed.total_score == 2
        assert db.query(AssessmentResult).filter(AssessmentResult.user_assessment_id == attempt.id).count() == 2

    def test_requires_every_required_question(self, service, user, sleep_assessment):
        hours, _, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)
        service.record_response(attempt.id, hours.id, option_id=_option(hours, "7+").id)

        with pytest.raises(AssessmentError, match="required"):
            service.complete_assessment(attempt.id)

    def test_cannot_complete_twice(self, service, user, sleep_assessment):
        hours, energy, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)
        service.record_response(attempt.id, hours.id, option_id=_option(hours, "7+").id)
        service.record_response(attempt.id, energy.id, option_id=_option(energy, "Low").id)
        service.complete_assessment(attempt.id)

        with pytest.raises(AssessmentError, match="completed"):
            service.complete_assessment(attempt.id)

    def test_completion_counts_for_organization(self, db, service, user, sleep_assessment):
        hours, energy, _ = _questions(sleep_assessment)
        org = OrganizationTracking(
            organization_name="Acme",
            contact_email="hr@acme.test",
            assessment_id=sleep_assessment.id,
            tracking_code="ACME-2024",
        )
        db.add(org)
        db.commit()
        attempt = service.start_assessment(user.id, sleep_assessment.id, tracking_code="ACME-2024")
        service.record_response(attempt.id, hours.id, option_id=_option(hours, "7+").id)
        service.record_response(attempt.id, energy.id, option_id=_option(energy, "Low").id)

        service.complete_assessment(attempt.id)

        db.refresh(org)
        assert org.completed_assessments == 1


class TestOptionValueLock:
    def test_value_can_change_before_any_answer(self, db, sleep_assessment):
        option = _option(sleep_assessment.questions[0], "7+")

        updated = crud.question_option.update_option_value(db, db_obj=option, option_value=5)

        assert updated.option_value == 5

    def test_value_is_locked_once_answered(self, db, service, user, sleep_assessment):
        hours, _, _ = _questions(sleep_assessment)
        option = _option(hours, "7+")
        attempt = service.start_assessment(user.id, sleep_assessment.id)
        service.record_response(attempt.id, hours.id, option_id=option.id)

        with pytest.raises(OptionInUseError):
            crud.question_option.update_option_value(db, db_obj=option, option_value=10)


class TestCascade:
    def test_deleting_attempt_removes_responses_and_results(self, db, service, user, sleep_assessment):
        hours, energy, _ = _questions(sleep_assessment)
        attempt = service.start_assessment(user.id, sleep_assessment.id)
        service.record_response(attempt.id, hours.id, option_id=_option(hours, "7+").id)
        service.record_response(attempt.id, energy.id, option_id=_option(energy, "Low").id)
        service.complete_assessment(attempt.id)

        db.delete(db.get(UserAssessment, attempt.id))
        db.commit()

        assert db.query(UserResponse).count() == 0
        assert db.query(AssessmentResult).count() == 0

"""
Tests for discount codes, purchases and report package entitlements.
"""

from datetime import timedelta

import pytest

from healthmap.core.exceptions import CommerceError
from healthmap.models.billing import PackagePurchase, ReportPackage, StripeCustomer, UNLIMITED_REPORTS
from healthmap.models.commerce import DiscountCode
from healthmap.services import user_service
from healthmap.services.assessment_service import AssessmentService
from healthmap.services.commerce_service import CommerceService, calculate_discount, is_code_usable
from healthmap.utils.timezone import utcnow


@pytest.fixture
def user(db):
    return user_service.create_user(db, email="ann@example.com", password="secret1").user


@pytest.fixture
def service(db):
    return CommerceService(db)


@pytest.fixture
def attempt(db, user, sleep_assessment):
    return AssessmentService(db).start_assessment(user.id, sleep_assessment.id)


@pytest.fixture
def customer(db, user):
    stripe_customer = StripeCustomer(
        user_id=user.id,
        stripe_customer_id="cus_test_123",
        email=user.email,
        customer_type="individual",
    )
    db.add(stripe_customer)
    db.commit()
    return stripe_customer


def make_code(db, **overrides):
    values = {
        "code": "WELCOME20",
        "discount_type": "percentage",
        "discount_value": 20,
    }
    values.update(overrides)
    code = DiscountCode(**values)
    db.add(code)
    db.commit()
    return code


def make_package(db, **overrides):
    values = {
        "name": "Team pack",
        "package_type": "bulk",
        "report_count": 2,
        "total_price": 5000,
        "target_customer_type": "organization",
    }
    values.update(overrides)
    package = ReportPackage(**values)
    db.add(package)
    db.commit()
    return package


class TestDiscountCalculation:
    def test_percentage_rounds_down(self, db):
        code = make_code(db)

        assert calculate_discount(code, "full_report", 1999) == 399

    def test_fixed_amount_is_capped_at_price(self, db):
        code = make_code(db, code="FIVE", discount_type="fixed", discount_value=500)

        assert calculate_discount(code, "full_report", 300) == 300
        assert calculate_discount(code, "full_report", 1999) == 500

    def test_unknown_type_gives_nothing(self, db):
        code = make_code(db, code="ODD", discount_type="bogo")

        assert calculate_discount(code, "full_report", 1000) == 0

    def test_inactive_code(self, db):
        code = make_code(db, is_active=False)

        assert not is_code_usable(code, "full_report")
        assert calculate_discount(code, "full_report", 1000) == 0

    def test_validity_window(self, db):
        now = utcnow()
        expired = make_code(db, code="OLD", valid_from=now - timedelta(days=10), valid_until=now - timedelta(days=1))
        upcoming = make_code(db, code="SOON", valid_from=now + timedelta(days=1))

        assert not is_code_usable(expired, "full_report", now)
        assert not is_code_usable(upcoming, "full_report", now)

    def test_max_uses(self, db):
        code = make_code(db, max_uses=1, current_uses=1)

        assert not is_code_usable(code, "full_report")

    def test_applicable_products_json(self, db):
        code = make_code(db, applicable_products='["full_report"]')

        assert is_code_usable(code, "full_report")
        assert not is_code_usable(code, "organizational_package")

    def test_applicable_products_comma_separated(self, db):
        code = make_code(db, applicable_products="full_report, bulk")

        assert is_code_usable(code, "bulk")
        assert not is_code_usable(code, "single")


class TestPurchases:
    def test_purchase_without_code(self, service, user, attempt):
        purchase = service.create_purchase(user.id, "full_report", 1999, user_assessment_id=attempt.id)

        assert purchase.discount_amount == 0
        assert purchase.final_price == 1999
        assert purchase.payment_status == "pending"
        assert purchase.discount_code_id is None

    def test_purchase_with_code_counts_a_use(self, db, service, user):
        code = make_code(db)

        purchase = service.create_purchase(user.id, "full_report", 1999, discount_code="WELCOME20")

        assert purchase.discount_amount == 399
        assert purchase.final_price == 1600
        assert purchase.discount_code_id == code.id
        db.refresh(code)
        assert code.current_uses == 1

    def test_unusable_code_is_rejected(self, db, service, user):
        make_code(db, is_active=False)

        with pytest.raises(CommerceError, match="invalid or expired"):
            service.create_purchase(user.id, "full_report", 1999, discount_code="WELCOME20")

    def test_negative_price_is_rejected(self, service, user):
        with pytest.raises(CommerceError):
            service.create_purchase(user.id, "full_report", -1)

    def test_mark_status(self, service, user):
        purchase = service.create_purchase(user.id, "full_report", 1999)

        updated = service.mark_purchase_status(purchase.id, "completed", payment_provider="stripe", payment_id="pi_1")

        assert updated.payment_status == "completed"
        assert updated.payment_provider == "stripe"
        assert updated.payment_id == "pi_1"

    def test_mark_unknown_status(self, service, user):
        purchase = service.create_purchase(user.id, "full_report", 1999)

        with pytest.raises(CommerceError, match="Unknown payment status"):
            service.mark_purchase_status(purchase.id, "shipped")

    def test_mark_missing_purchase(self, service):
        with pytest.raises(CommerceError, match="not found"):
            service.mark_purchase_status("missing", "completed")


class TestPackagePurchases:
    def test_counted_package(self, db, service, customer):
        package = make_package(db, validity_days=30)

        package_purchase = service.create_package_purchase(customer.id, package.id)

        assert package_purchase.total_reports == 2
        assert package_purchase.reports_remaining == 2
        assert package_purchase.purchase_status == "active"
        assert package_purchase.final_price == 5000
        assert package_purchase.expires_at is not None

    def test_unlimited_package(self, db, service, customer):
        package = make_package(db, package_type="unlimited", report_count=None)

        package_purchase = service.create_package_purchase(customer.id, package.id)

        assert package_purchase.total_reports == UNLIMITED_REPORTS
        assert package_purchase.is_unlimited
        assert package_purchase.expires_at is None

    def test_inactive_package(self, db, service, customer):
        package = make_package(db, is_active=False)

        with pytest.raises(CommerceError):
            service.create_package_purchase(customer.id, package.id)

    def test_package_discount(self, db, service, customer):
        make_code(db, code="TEAM10", discount_value=10)
        package = make_package(db)

        package_purchase = service.create_package_purchase(customer.id, package.id, discount_code="TEAM10")

        assert package_purchase.discount_amount == 500
        assert package_purchase.final_price == 4500


class TestConsumeReports:
    def test_draws_down_to_exhausted(self, db, service, customer, attempt):
        package_purchase = service.create_package_purchase(customer.id, make_package(db).id)

        service.consume_package_report(package_purchase.id, attempt.id, assigned_to="bob@acme.test")
        assert db.get(PackagePurchase, package_purchase.id).reports_remaining == 1

        service.consume_package_report(package_purchase.id, attempt.id)
        exhausted = db.get(PackagePurchase, package_purchase.id)
        assert exhausted.reports_remaining == 0
        assert exhausted.purchase_status == "exhausted"

        with pytest.raises(CommerceError, match="exhausted"):
            service.consume_package_report(package_purchase.id, attempt.id)

    def test_unlimited_never_runs_out(self, db, service, customer, attempt):
        package = make_package(db, package_type="unlimited", report_count=None)
        package_purchase = service.create_package_purchase(customer.id, package.id)

        for _ in range(3):
            report = service.consume_package_report(package_purchase.id, attempt.id)

        assert report.report_status == "pending"
        refreshed = db.get(PackagePurchase, package_purchase.id)
        assert refreshed.reports_remaining == UNLIMITED_REPORTS
        assert refreshed.purchase_status == "active"

    def test_expired_package(self, db, service, customer, attempt):
        package_purchase = service.create_package_purchase(customer.id, make_package(db, validity_days=30).id)
        package_purchase.expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

        with pytest.raises(CommerceError, match="expired"):
            service.consume_package_report(package_purchase.id, attempt.id)

        assert db.get(PackagePurchase, package_purchase.id).purchase_status == "expired"

import json
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from healthmap import crud
from healthmap.core.exceptions import CommerceError
from healthmap.models.billing import (
    PackagePurchase,
    PurchasedReport,
    UNLIMITED_REPORTS,
    PACKAGE_STATUS_ACTIVE,
    PACKAGE_STATUS_EXHAUSTED,
    PACKAGE_STATUS_EXPIRED,
)
from healthmap.models.commerce import DiscountCode, Purchase, PAYMENT_STATUSES
from healthmap.utils.timezone import utcnow, to_utc_aware

logger = logging.getLogger(__name__)


def _applicable_products(code: DiscountCode) -> Optional[list]:
    if not code.applicable_products:
        return None
    try:
        products = json.loads(code.applicable_products)
    except (json.JSONDecodeError, TypeError):
        # Fallback: treat as comma-separated string
        products = [p.strip() for p in str(code.applicable_products).split(",") if p.strip()]
    return products if isinstance(products, list) else [products]


def is_code_usable(code: DiscountCode, product_type: str, now: Optional[datetime] = None) -> bool:
    now = to_utc_aware(now or utcnow())
    if not code.is_active:
        return False
    if code.valid_from and to_utc_aware(code.valid_from) > now:
        return False
    if code.valid_until and to_utc_aware(code.valid_until) < now:
        return False
    if code.max_uses is not None and code.current_uses >= code.max_uses:
        return False
    products = _applicable_products(code)
    if products is not None and product_type not in products:
        return False
    return True


def calculate_discount(code: DiscountCode, product_type: str, price: int, now: Optional[datetime] = None) -> int:
    """Discount in cents for ``price``; 0 when the code cannot be used."""
    if price <= 0 or not is_code_usable(code, product_type, now):
        return 0
    if code.discount_type == "percentage":
        amount = price * code.discount_value // 100
    elif code.discount_type == "fixed":
        amount = code.discount_value
    else:
        logger.warning(f"Unknown discount type {code.discount_type!r} on code {code.code}")
        return 0
    return max(0, min(amount, price))


class CommerceService:
    def __init__(self, db: Session):
        self.db = db

    def _resolve_discount(self, code: Optional[str], product_type: str, price: int) -> Tuple[Optional[DiscountCode], int]:
        if not code:
            return None, 0
        discount = crud.discount_code.get_by_code(self.db, code=code)
        if not discount or not is_code_usable(discount, product_type):
            raise CommerceError("Discount code is invalid or expired")
        return discount, calculate_discount(discount, product_type, price)

    def create_purchase(
        self,
        user_id: str,
        product_type: str,
        original_price: int,
        user_assessment_id: Optional[str] = None,
        discount_code: Optional[str] = None,
    ) -> Purchase:
        if original_price < 0:
            raise CommerceError("Price must not be negative")
        discount, discount_amount = self._resolve_discount(discount_code, product_type, original_price)

        purchase = Purchase(
            user_id=user_id,
            user_assessment_id=user_assessment_id,
            discount_code_id=discount.id if discount else None,
            product_type=product_type,
            original_price=original_price,
            discount_amount=discount_amount,
            final_price=original_price - discount_amount,
            payment_status="pending",
        )
        if discount:
            discount.current_uses += 1
        self.db.add(purchase)
        self.db.commit()
        self.db.refresh(purchase)
        logger.info(f"Recorded purchase {purchase.id} for user {user_id}: {purchase.final_price} cents")
        return purchase

    def mark_purchase_status(
        self,
        purchase_id: str,
        status: str,
        payment_provider: Optional[str] = None,
        payment_id: Optional[str] = None,
    ) -> Purchase:
        if status not in PAYMENT_STATUSES:
            raise CommerceError(f"Unknown payment status: {status}")
        purchase = crud.purchase.get(self.db, id=purchase_id)
        if not purchase:
            raise CommerceError("Purchase not found")
        update_data = {"payment_status": status}
        if payment_provider:
            update_data["payment_provider"] = payment_provider
        if payment_id:
            update_data["payment_id"] = payment_id
        return crud.purchase.update(self.db, db_obj=purchase, obj_in=update_data)

    def create_package_purchase(
        self,
        stripe_customer_id: str,
        report_package_id: str,
        stripe_payment_id: Optional[str] = None,
        discount_code: Optional[str] = None,
    ) -> PackagePurchase:
        package = crud.report_package.get(self.db, id=report_package_id)
        if not package or not package.is_active:
            raise CommerceError("Report package not found or inactive")
        discount, discount_amount = self._resolve_discount(
            discount_code, package.package_type, package.total_price
        )

        if package.report_count is None:
            report_total = UNLIMITED_REPORTS
        else:
            report_total = package.report_count
        now = utcnow()
        expires_at = now + timedelta(days=package.validity_days) if package.validity_days else None

        package_purchase = PackagePurchase(
            stripe_customer_id=stripe_customer_id,
            report_package_id=package.id,
            stripe_payment_id=stripe_payment_id,
            discount_code_id=discount.id if discount else None,
            original_price=package.total_price,
            discount_amount=discount_amount,
            final_price=package.total_price - discount_amount,
            reports_remaining=report_total,
            total_reports=report_total,
            purchase_status=PACKAGE_STATUS_ACTIVE,
            expires_at=expires_at,
            purchased_at=now,
        )
        if discount:
            discount.current_uses += 1
        self.db.add(package_purchase)
        self.db.commit()
        self.db.refresh(package_purchase)
        return package_purchase

    def consume_package_report(
        self,
        package_purchase_id: str,
        user_assessment_id: str,
        assigned_to: Optional[str] = None,
        assigned_by: Optional[str] = None,
    ) -> PurchasedReport:
        """Draw one report from a package entitlement."""
        package_purchase = crud.package_purchase.get(self.db, id=package_purchase_id)
        if not package_purchase:
            raise CommerceError("Package purchase not found")

        if (
            package_purchase.purchase_status == PACKAGE_STATUS_ACTIVE
            and package_purchase.expires_at
            and to_utc_aware(package_purchase.expires_at) <= utcnow()
        ):
            package_purchase.purchase_status = PACKAGE_STATUS_EXPIRED
            self.db.commit()

        if package_purchase.purchase_status != PACKAGE_STATUS_ACTIVE:
            raise CommerceError(f"Package is {package_purchase.purchase_status}")

        purchased_report = PurchasedReport(
            package_purchase_id=package_purchase.id,
            user_assessment_id=user_assessment_id,
            report_status="pending",
            assigned_to=assigned_to,
            assigned_by=assigned_by,
        )
        self.db.add(purchased_report)

        if not package_purchase.is_unlimited:
            package_purchase.reports_remaining -= 1
            if package_purchase.reports_remaining <= 0:
                package_purchase.purchase_status = PACKAGE_STATUS_EXHAUSTED
                logger.info(f"Package purchase {package_purchase.id} exhausted")

        self.db.commit()
        self.db.refresh(purchased_report)
        return purchased_report

from typing import Optional
from sqlalchemy.orm import Session

from healthmap.crud.base import CRUDBase
from healthmap.models.commerce import DiscountCode, OrganizationTracking, Purchase
from healthmap.models.billing import PackagePurchase, ReportPackage


class CRUDDiscountCode(CRUDBase[DiscountCode, DiscountCode, DiscountCode]):
    def get_by_code(self, db: Session, *, code: str) -> Optional[DiscountCode]:
        return db.query(DiscountCode).filter(DiscountCode.code == code).first()


class CRUDOrganizationTracking(CRUDBase[OrganizationTracking, OrganizationTracking, OrganizationTracking]):
    def get_by_tracking_code(self, db: Session, *, tracking_code: str) -> Optional[OrganizationTracking]:
        return (
            db.query(OrganizationTracking)
            .filter(OrganizationTracking.tracking_code == tracking_code)
            .first()
        )


discount_code = CRUDDiscountCode(DiscountCode)
organization_tracking = CRUDOrganizationTracking(OrganizationTracking)
purchase = CRUDBase[Purchase, Purchase, Purchase](Purchase)
report_package = CRUDBase[ReportPackage, ReportPackage, ReportPackage](ReportPackage)
package_purchase = CRUDBase[PackagePurchase, PackagePurchase, PackagePurchase](PackagePurchase)

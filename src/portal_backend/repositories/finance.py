import logging
import math
from typing import List, Optional, Tuple
from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session, joinedload

from .base import BaseRepository
from ..interface.receipts import ReceiptAction, ReceiptQuery, ReceiptReview
from ..model.base import utcnow
from ..model.finance import PaymentReceipt

logger = logging.getLogger(__name__)


class PaymentReceiptRepository(BaseRepository[PaymentReceipt]):
    """Repository for bursary review of uploaded payment receipts."""

    def __init__(self, db: Session):
        super().__init__(db, PaymentReceipt)

    def get_detail(self, receipt_id: str) -> Optional[PaymentReceipt]:
        return (
            self.db.query(PaymentReceipt)
            .options(joinedload(PaymentReceipt.student))
            .filter(PaymentReceipt.id == receipt_id)
            .first()
        )

    def search(self, params: ReceiptQuery) -> Tuple[List[PaymentReceipt], int]:
        query = self.db.query(PaymentReceipt).options(joinedload(PaymentReceipt.student))

        if params.status:
            query = query.filter(PaymentReceipt.status == params.status)
        if params.semester:
            query = query.filter(PaymentReceipt.semester == params.semester)
        if params.session:
            query = query.filter(PaymentReceipt.session_id == params.session)
        if params.search:
            pattern = f"%{params.search}%"
            query = query.filter(or_(
                cast(PaymentReceipt.payment_type, String).ilike(pattern),
                PaymentReceipt.transaction_reference.ilike(pattern),
                PaymentReceipt.remarks.ilike(pattern)
            ))

        total = query.count()
        receipts = (
            query.order_by(PaymentReceipt.created_at.desc())
            .offset((params.page - 1) * params.limit)
            .limit(params.limit)
            .all()
        )
        return receipts, total

    @staticmethod
    def total_pages(total: int, limit: int) -> int:
        return max(1, math.ceil(total / limit))

    def review(self, receipt: PaymentReceipt, review: ReceiptReview, reviewer_id: str) -> PaymentReceipt:
        """
        Approve or reject a receipt. ``accept`` is an alias of ``approve``;
        the caller checks that a rejection carries remarks.
        """
        now = utcnow()

        if review.action in (ReceiptAction.APPROVE, ReceiptAction.ACCEPT):
            updates = {"status": "approved", "verified_by": reviewer_id, "verified_at": now}
            if review.approved_amount is not None:
                updates["approved_amount"] = review.approved_amount
        else:
            updates = {
                "status": "rejected",
                "rejected_by": reviewer_id,
                "rejected_at": now,
                "remarks": review.remarks,
            }

        receipt = self.apply(receipt, updates)
        logger.info(f"Receipt {receipt.id} {updates['status']} by {reviewer_id}")
        return receipt

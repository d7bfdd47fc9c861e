from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_backend.api.exceptions import BadRequestException, NotFoundException
from portal_backend.database import get_db
from portal_backend.interface.receipts import (
    Pagination,
    ReceiptAction,
    ReceiptGet,
    ReceiptListResponse,
    ReceiptQuery,
    ReceiptReview
)
from portal_backend.model.finance import FEE_TYPES
from portal_backend.permissions.guards import ADMIN_OR_BURSARY
from portal_backend.permissions.principal import Principal
from portal_backend.repositories.finance import PaymentReceiptRepository

receipt_router = APIRouter()


@receipt_router.get("", response_model=ReceiptListResponse)
def list_receipts(
    principal: Annotated[Principal, Depends(ADMIN_OR_BURSARY)],
    params: ReceiptQuery = Depends(),
    db: Session = Depends(get_db)
):
    receipts, total = PaymentReceiptRepository(db).search(params)

    return ReceiptListResponse(
        fee_types=list(FEE_TYPES),
        receipts=[ReceiptGet.model_validate(r) for r in receipts],
        pagination=Pagination(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=PaymentReceiptRepository.total_pages(total, params.limit)
        )
    )


@receipt_router.get("/{receipt_id}")
def get_receipt(
    receipt_id: str,
    principal: Annotated[Principal, Depends(ADMIN_OR_BURSARY)],
    db: Session = Depends(get_db)
):
    receipt = PaymentReceiptRepository(db).get_detail(receipt_id)

    if receipt is None:
        raise NotFoundException("Receipt not found")

    return {"ok": True, "receipt": ReceiptGet.model_validate(receipt)}


@receipt_router.patch("/{receipt_id}")
def review_receipt(
    receipt_id: str,
    review: ReceiptReview,
    principal: Annotated[Principal, Depends(ADMIN_OR_BURSARY)],
    db: Session = Depends(get_db)
):
    if review.action == ReceiptAction.REJECT and not review.remarks:
        raise BadRequestException("Remarks required when rejecting")

    receipts = PaymentReceiptRepository(db)
    receipt = receipts.get_detail(receipt_id)

    if receipt is None:
        raise NotFoundException("Receipt not found")

    receipt = receipts.review(receipt, review, principal.get_user_id_or_throw())

    return {"ok": True, "receipt": ReceiptGet.model_validate(receipt)}

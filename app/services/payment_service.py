"""Payment Service - applies and reverses payments against enrollment balances"""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from app.models.enums import PaymentStatus, PaymentType
from app.models.payment import Payment
from app.schemas.payment import PaymentResponse
from app.services.access_scope import Actor, ensure_visible, resolve_scope
from app.services.ledger_store import LedgerStore
from app.utils.money import ZERO, to_money
from app.utils.time import get_local_now

logger = logging.getLogger(__name__)


class PaymentService:
    """Service layer for the enrollment balance ledger"""

    @staticmethod
    def settled_amount(payment_type: PaymentType, amount: Decimal, remaining: Decimal) -> Decimal:
        """
        Amount that actually hits the ledger.

        PAGO_TOTAL always settles exactly the remaining balance, whatever the
        caller sent. ABONO must be positive and may not exceed the remaining
        balance.

        Raises:
            InvalidArgumentError: non-positive amount, overdraft, or nothing to settle
        """
        if amount <= 0:
            raise InvalidArgumentError("Payment amount must be greater than zero")

        if payment_type == PaymentType.PAGO_TOTAL:
            if remaining <= 0:
                raise InvalidArgumentError("Enrollment has no pending balance")
            return remaining

        if amount > remaining:
            raise InvalidArgumentError(
                "Payment exceeds pending balance",
                {"remaining": str(remaining)},
            )
        return amount

    @staticmethod
    async def register_payment(
        db: AsyncSession,
        actor: Actor,
        enrollment_id: UUID,
        amount: Decimal,
        payment_type: PaymentType,
        payment_method_id: UUID,
        transaction_reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> PaymentResponse:
        """
        Record a payment and move the enrollment's paid_amount in one transaction.

        The enrollment row is locked for the duration so concurrent payments
        on the same enrollment validate against the current balance.

        Raises:
            NotFoundError: enrollment or payment method does not exist
            ForbiddenError: enrollment outside the caller's branch scope
            InvalidStateError: enrollment does not accept payments
            InvalidArgumentError: bad amount (see ``settled_amount``)
        """
        scope = resolve_scope(actor)

        enrollment = await LedgerStore.get_enrollment(db, enrollment_id, for_update=True)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        ensure_visible(scope, enrollment.branch_id, "Enrollment")

        method = await LedgerStore.get_payment_method(db, payment_method_id)
        if not method:
            raise NotFoundError("Payment method", payment_method_id)
        if not method.is_active:
            raise InvalidArgumentError("Payment method is inactive")

        if not enrollment.accepts_payments:
            raise InvalidStateError(
                "Enrollment is inactive",
                {"status": enrollment.status.value, "active": bool(enrollment.is_active)},
            )

        paid = to_money(enrollment.paid_amount)
        remaining = to_money(enrollment.total_amount) - paid
        settled = PaymentService.settled_amount(payment_type, to_money(amount), remaining)

        try:
            enrollment.paid_amount = paid + settled
            payment = Payment(
                enrollment_id=enrollment.id,
                branch_id=enrollment.branch_id,
                payment_method=method,
                amount=settled,
                payment_date=get_local_now(),
                type=payment_type,
                status=PaymentStatus.CONFIRMADO,
                transaction_reference=transaction_reference,
                notes=notes,
            )
            await LedgerStore.add_payment(db, payment)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payment registered",
            extra={
                "payment_id": str(payment.id),
                "enrollment_id": str(enrollment.id),
                "payment_type": payment_type.value,
                "requested_amount": str(amount),
                "settled_amount": str(settled),
                "paid_amount": str(enrollment.paid_amount),
            },
        )
        return PaymentResponse.from_payment(payment)

    @staticmethod
    async def cancel_payment(db: AsyncSession, actor: Actor, payment_id: UUID) -> None:
        """
        Void a confirmed payment and take its amount back off the enrollment.

        paid_amount is floored at zero. Voiding is permanent; a second void is
        rejected and changes nothing.

        Raises:
            NotFoundError: payment does not exist
            ForbiddenError: payment outside the caller's branch scope
            InvalidStateError: payment already voided
        """
        scope = resolve_scope(actor)

        payment = await LedgerStore.get_payment(db, payment_id, for_update=True)
        if not payment:
            raise NotFoundError("Payment", payment_id)
        ensure_visible(scope, payment.branch_id, "Payment")

        if payment.is_voided:
            raise InvalidStateError("Payment already voided")

        enrollment = await LedgerStore.get_enrollment(db, payment.enrollment_id, for_update=True)
        if not enrollment:
            raise NotFoundError("Enrollment", payment.enrollment_id)

        previous_paid = to_money(enrollment.paid_amount)
        new_paid = previous_paid - to_money(payment.amount)
        if new_paid < ZERO:
            logger.warning(
                "Voided payment exceeds paid amount; flooring balance at zero",
                extra={
                    "payment_id": str(payment.id),
                    "enrollment_id": str(enrollment.id),
                    "paid_amount": str(previous_paid),
                    "payment_amount": str(payment.amount),
                },
            )
            new_paid = ZERO

        try:
            enrollment.paid_amount = new_paid
            payment.status = PaymentStatus.ANULADO
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payment voided",
            extra={
                "payment_id": str(payment.id),
                "enrollment_id": str(enrollment.id),
                "paid_amount": str(new_paid),
            },
        )

    @staticmethod
    async def list_payments(
        db: AsyncSession,
        actor: Actor,
        branch_id: Optional[UUID] = None,
    ) -> List[PaymentResponse]:
        """All payments in scope, newest first."""
        scope = resolve_scope(actor, branch_id)
        if scope.is_empty:
            return []
        payments = await LedgerStore.list_payments(db, scope)
        return [PaymentResponse.from_payment(p) for p in payments]

    @staticmethod
    async def get_payments_by_enrollment(
        db: AsyncSession,
        actor: Actor,
        enrollment_id: UUID,
    ) -> List[PaymentResponse]:
        """Payment history of one enrollment, oldest first."""
        scope = resolve_scope(actor)
        enrollment = await LedgerStore.get_enrollment(db, enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        ensure_visible(scope, enrollment.branch_id, "Enrollment")

        payments = await LedgerStore.list_payments_by_enrollment(db, enrollment_id)
        return [PaymentResponse.from_payment(p) for p in payments]

"""Unit tests for PaymentService against a throwaway SQLite ledger."""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import select

from app.core.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from app.models import Payment
from app.models.enums import EnrollmentStatus, PaymentStatus, PaymentType
from app.services.payment_service import PaymentService


# settled_amount (pure)

def test_settled_amount_abono_within_balance():
    assert PaymentService.settled_amount(
        PaymentType.ABONO, Decimal("200000"), Decimal("500000")
    ) == Decimal("200000")


def test_settled_amount_abono_exact_balance():
    assert PaymentService.settled_amount(
        PaymentType.ABONO, Decimal("500000"), Decimal("500000")
    ) == Decimal("500000")


def test_settled_amount_abono_overdraft():
    with pytest.raises(InvalidArgumentError):
        PaymentService.settled_amount(PaymentType.ABONO, Decimal("500000.01"), Decimal("500000"))


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
def test_settled_amount_non_positive(amount):
    with pytest.raises(InvalidArgumentError):
        PaymentService.settled_amount(PaymentType.ABONO, amount, Decimal("500000"))


def test_settled_amount_pago_total_ignores_amount():
    assert PaymentService.settled_amount(
        PaymentType.PAGO_TOTAL, Decimal("1"), Decimal("300000")
    ) == Decimal("300000")


def test_settled_amount_pago_total_nothing_pending():
    with pytest.raises(InvalidArgumentError):
        PaymentService.settled_amount(PaymentType.PAGO_TOTAL, Decimal("1"), Decimal("0"))


# register / cancel

@pytest.mark.asyncio
async def test_full_payment_cycle(db_session, ledger, make_enrollment):
    """500000 enrollment: ABONO, PAGO_TOTAL, then both voided back to zero."""
    enrollment = await make_enrollment(branch=ledger["dui"])
    actor = ledger["actors"]["admin_dui"]

    abono = await PaymentService.register_payment(
        db_session, actor, enrollment.id, Decimal("200000"), PaymentType.ABONO, ledger["cash"].id
    )
    assert abono.amount == Decimal("200000.00")
    assert abono.status == PaymentStatus.CONFIRMADO
    assert abono.branch_id == ledger["dui"].id
    assert abono.payment_method_name == "Efectivo"
    assert enrollment.paid_amount == Decimal("200000.00")

    total = await PaymentService.register_payment(
        db_session, actor, enrollment.id, Decimal("1"), PaymentType.PAGO_TOTAL, ledger["cash"].id
    )
    assert total.amount == Decimal("300000.00")
    assert enrollment.paid_amount == Decimal("500000.00")

    await PaymentService.cancel_payment(db_session, actor, abono.id)
    assert enrollment.paid_amount == Decimal("300000.00")

    await PaymentService.cancel_payment(db_session, actor, total.id)
    assert enrollment.paid_amount == Decimal("0.00")

    statuses = (
        await db_session.execute(select(Payment.status).where(Payment.enrollment_id == enrollment.id))
    ).scalars().all()
    assert sorted(statuses) == [PaymentStatus.ANULADO, PaymentStatus.ANULADO]


@pytest.mark.asyncio
async def test_overdraft_leaves_ledger_untouched(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"], paid="450000.00")
    with pytest.raises(InvalidArgumentError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["super_admin"], enrollment.id,
            Decimal("60000"), PaymentType.ABONO, ledger["cash"].id,
        )
    assert enrollment.paid_amount == Decimal("450000.00")
    count = len(
        (await db_session.execute(select(Payment.id).where(Payment.enrollment_id == enrollment.id))).all()
    )
    assert count == 0


@pytest.mark.asyncio
async def test_pago_total_on_settled_enrollment(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"], paid="500000.00")
    with pytest.raises(InvalidArgumentError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["admin_dui"], enrollment.id,
            Decimal("1"), PaymentType.PAGO_TOTAL, ledger["cash"].id,
        )


@pytest.mark.asyncio
async def test_double_void_is_rejected(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"])
    actor = ledger["actors"]["admin_dui"]
    payment = await PaymentService.register_payment(
        db_session, actor, enrollment.id, Decimal("100000"), PaymentType.ABONO, ledger["cash"].id
    )
    await PaymentService.cancel_payment(db_session, actor, payment.id)

    with pytest.raises(InvalidStateError):
        await PaymentService.cancel_payment(db_session, actor, payment.id)
    assert enrollment.paid_amount == Decimal("0.00")


@pytest.mark.asyncio
async def test_inactive_enrollment_rejects_payment(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(
        branch=ledger["dui"], active=False, status=EnrollmentStatus.CANCELLED
    )
    with pytest.raises(InvalidStateError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["admin_dui"], enrollment.id,
            Decimal("1000"), PaymentType.ABONO, ledger["cash"].id,
        )


@pytest.mark.asyncio
async def test_completed_enrollment_rejects_payment(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"], status=EnrollmentStatus.COMPLETED)
    with pytest.raises(InvalidStateError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["admin_dui"], enrollment.id,
            Decimal("1000"), PaymentType.ABONO, ledger["cash"].id,
        )


@pytest.mark.asyncio
async def test_admin_cannot_pay_other_branch(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(student=ledger["luis"], branch=ledger["sog"])
    with pytest.raises(ForbiddenError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["admin_dui"], enrollment.id,
            Decimal("1000"), PaymentType.ABONO, ledger["cash"].id,
        )
    assert enrollment.paid_amount == Decimal("0.00")


@pytest.mark.asyncio
async def test_admin_without_branch_cannot_pay(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"])
    with pytest.raises(ForbiddenError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["admin_none"], enrollment.id,
            Decimal("1000"), PaymentType.ABONO, ledger["cash"].id,
        )


@pytest.mark.asyncio
async def test_admin_cannot_void_other_branch(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(student=ledger["luis"], branch=ledger["sog"])
    payment = await PaymentService.register_payment(
        db_session, ledger["actors"]["admin_sog"], enrollment.id,
        Decimal("1000"), PaymentType.ABONO, ledger["cash"].id,
    )
    with pytest.raises(ForbiddenError):
        await PaymentService.cancel_payment(db_session, ledger["actors"]["admin_dui"], payment.id)
    assert enrollment.paid_amount == Decimal("1000.00")


@pytest.mark.asyncio
async def test_unknown_enrollment_and_method(db_session, ledger, make_enrollment):
    actor = ledger["actors"]["super_admin"]
    with pytest.raises(NotFoundError):
        await PaymentService.register_payment(
            db_session, actor, uuid.uuid4(), Decimal("1000"), PaymentType.ABONO, ledger["cash"].id
        )

    enrollment = await make_enrollment(branch=ledger["dui"])
    with pytest.raises(NotFoundError):
        await PaymentService.register_payment(
            db_session, actor, enrollment.id, Decimal("1000"), PaymentType.ABONO, uuid.uuid4()
        )

    with pytest.raises(NotFoundError):
        await PaymentService.cancel_payment(db_session, actor, uuid.uuid4())


@pytest.mark.asyncio
async def test_inactive_payment_method_is_rejected(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"])
    with pytest.raises(InvalidArgumentError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["admin_dui"], enrollment.id,
            Decimal("1000"), PaymentType.ABONO, ledger["cheque"].id,
        )


@pytest.mark.asyncio
async def test_student_role_cannot_register(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"])
    with pytest.raises(ForbiddenError):
        await PaymentService.register_payment(
            db_session, ledger["actors"]["student"], enrollment.id,
            Decimal("1000"), PaymentType.ABONO, ledger["cash"].id,
        )


@pytest.mark.asyncio
async def test_void_floors_paid_amount_at_zero(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"])
    actor = ledger["actors"]["admin_dui"]
    payment = await PaymentService.register_payment(
        db_session, actor, enrollment.id, Decimal("100000"), PaymentType.ABONO, ledger["cash"].id
    )
    # drift the running total below the payment amount
    enrollment.paid_amount = Decimal("40000.00")
    await db_session.commit()

    await PaymentService.cancel_payment(db_session, actor, payment.id)
    assert enrollment.paid_amount == Decimal("0.00")


@pytest.mark.asyncio
async def test_list_payments_is_scoped(db_session, ledger, make_enrollment):
    dui_enrollment = await make_enrollment(branch=ledger["dui"])
    sog_enrollment = await make_enrollment(student=ledger["luis"], branch=ledger["sog"])
    root = ledger["actors"]["super_admin"]
    await PaymentService.register_payment(
        db_session, root, dui_enrollment.id, Decimal("1000"), PaymentType.ABONO, ledger["cash"].id
    )
    await PaymentService.register_payment(
        db_session, root, sog_enrollment.id, Decimal("2000"), PaymentType.ABONO, ledger["cash"].id
    )

    assert len(await PaymentService.list_payments(db_session, root)) == 2
    narrowed = await PaymentService.list_payments(db_session, root, branch_id=ledger["sog"].id)
    assert [p.amount for p in narrowed] == [Decimal("2000.00")]

    admin_view = await PaymentService.list_payments(db_session, ledger["actors"]["admin_dui"])
    assert [p.enrollment_id for p in admin_view] == [dui_enrollment.id]

    assert await PaymentService.list_payments(db_session, ledger["actors"]["admin_none"]) == []


@pytest.mark.asyncio
async def test_payments_by_enrollment(db_session, ledger, make_enrollment):
    enrollment = await make_enrollment(branch=ledger["dui"])
    actor = ledger["actors"]["admin_dui"]
    await PaymentService.register_payment(
        db_session, actor, enrollment.id, Decimal("1000"), PaymentType.ABONO, ledger["cash"].id,
        transaction_reference="REC-1",
    )
    await PaymentService.register_payment(
        db_session, actor, enrollment.id, Decimal("2000"), PaymentType.ABONO, ledger["cash"].id,
    )

    history = await PaymentService.get_payments_by_enrollment(db_session, actor, enrollment.id)
    assert [p.amount for p in history] == [Decimal("1000.00"), Decimal("2000.00")]
    assert history[0].transaction_reference == "REC-1"

    with pytest.raises(ForbiddenError):
        await PaymentService.get_payments_by_enrollment(
            db_session, ledger["actors"]["admin_sog"], enrollment.id
        )

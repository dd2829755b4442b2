"""Centralized Enum Definitions"""

import enum


# Identity
class UserRole(str, enum.Enum):
    """Caller roles; the closed set the access scope resolver matches on"""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"


# Enrollment
class EnrollmentStatus(str, enum.Enum):
    """Enrollment lifecycle: ACTIVE -> COMPLETED | CANCELLED (terminal)"""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class EnrollmentPaymentState(str, enum.Enum):
    """Derived payment progress shown in enrollment summaries"""
    PAGADO = "PAGADO"
    EN_PROGRESO = "EN_PROGRESO"
    PENDIENTE = "PENDIENTE"


# Payments
class PaymentType(str, enum.Enum):
    """ABONO is a partial payment; PAGO_TOTAL settles the whole remaining balance"""
    ABONO = "ABONO"
    PAGO_TOTAL = "PAGO_TOTAL"


class PaymentStatus(str, enum.Enum):
    """Payment status; CONFIRMADO -> ANULADO happens at most once"""
    CONFIRMADO = "CONFIRMADO"
    ANULADO = "ANULADO"

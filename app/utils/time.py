"""Time Utilities"""

from datetime import date, datetime, timezone


def get_utc_now() -> datetime:
    """
    Returns a naive UTC datetime.
    Matches the DB schema (TIMESTAMP WITHOUT TIME ZONE) for audit columns.
    Avoids 'datetime.utcnow()' deprecation warnings.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_local_now() -> datetime:
    """
    Naive wall-clock time of the school's local calendar.
    Used for payment dates so they group by the day the cashier saw.
    """
    return datetime.now()


def get_local_today() -> date:
    """Local civil date used for enrollment dates and the default report year"""
    return get_local_now().date()

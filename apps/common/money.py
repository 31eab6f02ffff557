"""Money and accounting-period helpers shared by the ledger apps."""

import re
from calendar import monthrange
from datetime import datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.utils import timezone

from .exceptions import ValidationError

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

PERIOD_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


def to_money(value) -> Decimal:
    """Coerce ``value`` to a 2-place Decimal (half-up)."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount) -> str:
    return f"{to_money(amount):.2f}"


def period_for(moment=None) -> str:
    """Return the ``YYYY-MM`` period token of ``moment`` (default: now)."""
    moment = moment or timezone.now()
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.strftime('%Y-%m')


def validate_period(period: str) -> str:
    if not isinstance(period, str) or not PERIOD_PATTERN.match(period):
        raise ValidationError("Invalid period format. Use YYYY-MM")
    return period


def period_bounds(period: str):
    """
    Return the aware ``[start, end]`` datetimes covering ``period``.

    Raises:
        ValidationError: If the period is not ``YYYY-MM``.
    """
    validate_period(period)
    year, month = (int(part) for part in period.split('-'))
    last_day = monthrange(year, month)[1]
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime(year, month, 1), tz)
    end = timezone.make_aware(datetime.combine(datetime(year, month, last_day), time.max), tz)
    return start, end

"""
Share allocation.

Splits a group expense equally across its obligated members. Every share
is ``amount / n`` rounded down to the cent and the last member's share
takes the remainder, so the shares always sum to exactly ``amount``.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from typing import Iterable, List
from uuid import UUID

from apps.common.exceptions import ValidationError
from apps.common.money import CENT, ZERO, to_money


@dataclass(frozen=True)
class AllocatedShare:
    user_id: UUID
    amount: Decimal
    is_paid: bool


def allocate_shares(*, amount, member_ids: Iterable[UUID], payer_id: UUID) -> List[AllocatedShare]:
    """
    Return one share per distinct member, in first-seen order.

    The payer's own share, if any, starts paid.

    Raises:
        ValidationError: If amount <= 0 or there are no members
    """
    amount = to_money(amount)
    if amount <= ZERO:
        raise ValidationError("Amount must be greater than zero")

    seen = {}
    for member_id in member_ids:
        seen.setdefault(str(member_id), member_id)
    members = list(seen.values())
    if not members:
        raise ValidationError("A group expense needs at least one member to split between")

    count = len(members)
    base = (amount / count).quantize(CENT, rounding=ROUND_DOWN)
    last = amount - base * (count - 1)

    shares = []
    for index, member_id in enumerate(members):
        shares.append(AllocatedShare(
            user_id=member_id,
            amount=last if index == count - 1 else base,
            is_paid=str(member_id) == str(payer_id),
        ))
    return shares

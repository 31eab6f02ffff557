"""
Debt ledger.

Group balances are built from stored share amounts:

* the payer of each group expense gains the full amount,
* each share holder loses their share amount,
* a completed settlement moves ``amount`` from the receiver's balance to
  the sender's.

Positive means the member is owed money, negative means they owe. Users
who left the group but appear in its history keep their balance.

``reduce_to_pairwise_debts`` turns balances into transfers by greedy
matching: the largest debtor pays the largest creditor, both running
balances shrink, repeat. Ties go to the lower user id string, so the
result is deterministic.
"""

import heapq
from decimal import Decimal
from typing import Dict, List
from uuid import UUID

from django.db.models import Sum

from apps.accounts.models import User
from apps.common.money import CENT, ZERO, to_money
from apps.expenses.models import Expense, ExpenseShare
from apps.groups.models import Group
from apps.groups.services import GroupNotFoundError, require_membership
from apps.ledger.models import Settlement, SettlementStatus


def _to_cents(amount: Decimal) -> int:
    return int((to_money(amount) / CENT).to_integral_value())


def _from_cents(cents: int) -> Decimal:
    return (Decimal(cents) * CENT).quantize(CENT)


def compute_group_balances(*, group_id: UUID) -> Dict[UUID, Decimal]:
    """
    Net balance per user for the group.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    balances: Dict[UUID, Decimal] = {user_id: ZERO for user_id in group.member_ids()}
    balances.setdefault(group.creator_id, ZERO)

    def adjust(user_id, amount):
        balances[user_id] = balances.get(user_id, ZERO) + to_money(amount)

    paid = (
        Expense.objects
        .filter(group=group)
        .values('paid_by')
        .annotate(total=Sum('amount'))
    )
    for row in paid:
        adjust(row['paid_by'], row['total'])

    owed = (
        ExpenseShare.objects
        .filter(expense__group=group)
        .values('user')
        .annotate(total=Sum('amount'))
    )
    for row in owed:
        adjust(row['user'], -to_money(row['total']))

    settled = Settlement.objects.filter(group=group, status=SettlementStatus.COMPLETED)
    for from_user_id, to_user_id, amount in settled.values_list('from_user_id', 'to_user_id', 'amount'):
        adjust(from_user_id, amount)
        adjust(to_user_id, -to_money(amount))

    return balances


def reduce_to_pairwise_debts(balances: Dict[UUID, Decimal]) -> List[dict]:
    """
    Greedy settlement of ``balances`` into ``{'from_user', 'to_user',
    'amount'}`` transfers.

    Transfers only ever go from a negative balance to a positive one, and
    each debtor's transfers add up to what they owe (as far as creditors
    can absorb it).
    """
    debtors = []
    creditors = []
    for user_id, balance in balances.items():
        cents = _to_cents(balance)
        if cents < 0:
            heapq.heappush(debtors, (cents, str(user_id), user_id))
        elif cents > 0:
            heapq.heappush(creditors, (-cents, str(user_id), user_id))

    transfers = []
    while debtors and creditors:
        debt, debtor_key, debtor = heapq.heappop(debtors)
        credit, creditor_key, creditor = heapq.heappop(creditors)

        cents = min(-debt, -credit)
        transfers.append({
            'from_user': debtor,
            'to_user': creditor,
            'amount': _from_cents(cents),
        })

        if debt + cents < 0:
            heapq.heappush(debtors, (debt + cents, debtor_key, debtor))
        if credit + cents < 0:
            heapq.heappush(creditors, (credit + cents, creditor_key, creditor))

    return transfers


def get_group_debts(*, group_id: UUID, requester: User) -> List[dict]:
    """
    Who owes whom in the group.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If requester is not a member
    """
    require_membership(group_id=group_id, user=requester)
    return reduce_to_pairwise_debts(compute_group_balances(group_id=group_id))

"""Per-user debt summary across all groups, based on unpaid shares."""

from apps.accounts.models import User
from apps.common.money import ZERO
from apps.expenses.models import Expense


def get_user_debt_summary(*, user: User) -> dict:
    """
    Summarise the user's open shares.

    Only group expenses where the user holds a share are considered:

    * their own unpaid share on an expense someone else paid counts
      towards ``you_owe``;
    * on expenses they paid, the other members' unpaid shares count
      towards ``you_are_owed``.

    ``owe_count`` and ``owed_count`` are distinct counterparties.
    """
    expenses = (
        Expense.objects
        .filter(group__isnull=False, shares__user=user)
        .prefetch_related('shares')
        .distinct()
    )

    you_owe = ZERO
    you_are_owed = ZERO
    owed_to = set()
    owed_from = set()

    for expense in expenses:
        shares = list(expense.shares.all())
        own = next((share for share in shares if share.user_id == user.id), None)
        if own is None:
            continue

        if expense.paid_by_id != user.id:
            if not own.is_paid:
                you_owe += own.amount
                owed_to.add(expense.paid_by_id)
            continue

        for share in shares:
            if share.user_id != user.id and not share.is_paid:
                you_are_owed += share.amount
                owed_from.add(share.user_id)

    return {
        'you_owe': you_owe,
        'you_are_owed': you_are_owed,
        'owe_count': len(owed_to),
        'owed_count': len(owed_from),
    }

"""
Ledger app services layer.

Debt computation across group expenses and settlements, share payment
and settlement records.
"""

from .exceptions import (
    ShareNotFoundError,
    NotGroupExpenseError,
    ShareAlreadyPaidError,
    NotAllowedToMarkShareError,
    SettlementNotFoundError,
    SettlementAlreadyCompletedError,
    NotSettlementPartyError,
    InvalidSettlementError,
)

from .debt_ledger import (
    compute_group_balances,
    reduce_to_pairwise_debts,
    get_group_debts,
)

from .debt_summary import (
    get_user_debt_summary,
)

from .share_payment import (
    mark_share_paid,
)

from .settlement_management import (
    create_settlement,
    complete_settlement,
    list_group_settlements,
    list_user_settlements,
)


__all__ = [
    # Exceptions
    'ShareNotFoundError',
    'NotGroupExpenseError',
    'ShareAlreadyPaidError',
    'NotAllowedToMarkShareError',
    'SettlementNotFoundError',
    'SettlementAlreadyCompletedError',
    'NotSettlementPartyError',
    'InvalidSettlementError',

    # Debt Ledger
    'compute_group_balances',
    'reduce_to_pairwise_debts',
    'get_group_debts',

    # Debt Summary
    'get_user_debt_summary',

    # Share Payment
    'mark_share_paid',

    # Settlements
    'create_settlement',
    'complete_settlement',
    'list_group_settlements',
    'list_user_settlements',
]

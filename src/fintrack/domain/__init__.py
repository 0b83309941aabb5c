"""Domain layer for fintrack application."""

# Services are resolved lazily: the utils and database layers import
# fintrack.domain.errors and fintrack.domain.entities, and the services
# import those layers in turn.
_SERVICES = {
    "AccountService": "fintrack.domain.account",
    "BalanceReconciler": "fintrack.domain.balance",
    "BillSplitService": "fintrack.domain.bill_split",
    "CategoryService": "fintrack.domain.category",
    "GoalService": "fintrack.domain.goal",
    "LedgerService": "fintrack.domain.ledger",
    "StatisticsService": "fintrack.domain.statistics",
    "UserService": "fintrack.domain.user",
}

__all__ = sorted(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

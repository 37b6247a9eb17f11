from typing import Iterable, NamedTuple

from expense_tracker.domain import Expense

SORT_KEYS = ("date", "amount", "category")


class TransactionView(NamedTuple):
    expenses: tuple[Expense, ...]
    count: int
    total: float


def by_search_term(term: str):
    needle = term.lower()

    def _filter(e: Expense) -> bool:
        return needle in e.description.lower()

    return _filter


def by_category(category: str):
    def _filter(e: Expense) -> bool:
        return not category or e.category == category

    return _filter


def filter_expenses(
    expenses: Iterable[Expense], search_term: str = "", category: str = ""
) -> tuple[Expense, ...]:
    matches_term = by_search_term(search_term or "")
    matches_category = by_category(category or "")
    return tuple(e for e in expenses if matches_term(e) and matches_category(e))


def sort_expenses(expenses: Iterable[Expense], key: str = "date") -> tuple[Expense, ...]:
    """Order expenses for the transaction list.

    ``date`` and ``amount`` sort descending, ``category`` ascending. Ties keep
    their input order. Any other key leaves the order untouched.
    """
    if key == "date":
        return tuple(sorted(expenses, key=lambda e: e.date, reverse=True))
    if key == "amount":
        return tuple(sorted(expenses, key=lambda e: e.amount, reverse=True))
    if key == "category":
        return tuple(sorted(expenses, key=lambda e: e.category))
    return tuple(expenses)


def total(expenses: Iterable[Expense]) -> float:
    return sum((e.amount for e in expenses), 0.0)


def expense_categories(expenses: Iterable[Expense]) -> list[str]:
    seen: dict[str, None] = {}
    for e in expenses:
        seen.setdefault(e.category, None)
    return list(seen)


def transaction_view(
    expenses: Iterable[Expense],
    search_term: str = "",
    category: str = "",
    sort_key: str = "date",
) -> TransactionView:
    rows = sort_expenses(filter_expenses(expenses, search_term, category), sort_key)
    return TransactionView(expenses=rows, count=len(rows), total=total(rows))

"""Assign questions to categories by keyword matching."""

from __future__ import annotations

from surveylens.categories import CategoryTable, default_category_table


def classify_question(label: str, table: CategoryTable | None = None) -> str:
    """Return the id of the first category with a keyword found in *label*.

    Categories are tried in table order and matching is a case-insensitive
    substring test, so the first hit wins even when a later category would
    also match.  Falls back to ``table.default_id``.
    """
    if table is None:
        table = default_category_table()
    text = label.lower()
    for category in table.categories:
        if any(kw.lower() in text for kw in category.keywords):
            return category.id
    return table.default_id

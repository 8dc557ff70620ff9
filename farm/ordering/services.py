# farm/ordering/services.py
"""
Display order of the inventory table.

Persisted as a JSON list of product ids under the ROW_ORDER_KEY setting.
Internally handled as a rank map {product_id: 1..N}.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from flask import current_app

from farm.api import ApiValidationError
from farm.settings.services import get_setting, set_setting


def _key():
    return current_app.config['ROW_ORDER_KEY']


def load_row_order() -> Optional[List[int]]:
    """Stored id list, or None when absent or unreadable (→ natural id order)."""
    raw = get_setting(_key())
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in raw):
        current_app.logger.warning("Stored row order %r is malformed, using id order", _key())
        return None
    return raw


def save_row_order(product_ids: Iterable[int]) -> List[int]:
    ids = list(product_ids)
    set_setting(_key(), ids)
    return ids


def rank_map(order: Optional[Iterable[int]], product_ids: Iterable[int]) -> Dict[int, int]:
    """
    Ranks 1..N for the live product ids.
    Stored ids that are no longer live are pruned, duplicates ignored;
    live ids missing from the stored order follow in id order after the
    highest stored rank.
    """
    live = sorted(set(product_ids))
    live_set = set(live)

    ranked, seen = [], set()
    for pid in order or []:
        if pid in live_set and pid not in seen:
            ranked.append(pid)
            seen.add(pid)
    ranked.extend(pid for pid in live if pid not in seen)

    return {pid: pos for pos, pid in enumerate(ranked, start=1)}


def ordered_ids(ranks: Dict[int, int]) -> List[int]:
    return [pid for pid, _ in sorted(ranks.items(), key=lambda item: item[1])]


def apply_row_order(products, order):
    ranks = rank_map(order, [p.id for p in products])
    return sorted(products, key=lambda p: ranks[p.id])


def move_product(ranks: Dict[int, int], product_id: int, position: int) -> Dict[int, int]:
    """
    Moves one product to a 1-based position. Everything between the old and
    the new position shifts by one toward the gap; the rest keep their rank.
    """
    total = len(ranks)
    if not 1 <= position <= total:
        raise ApiValidationError(
            "Invalid row number",
            [{"field": "position", "message": f"Please enter a number between 1 and {total}"}],
        )

    current = ranks[product_id]
    moved = dict(ranks)
    if position == current:
        return moved

    if position < current:
        for pid, pos in ranks.items():
            if position <= pos < current:
                moved[pid] = pos + 1
    else:
        for pid, pos in ranks.items():
            if current < pos <= position:
                moved[pid] = pos - 1

    moved[product_id] = position
    return moved


def forget_product(product_id: int) -> None:
    """Drops a deleted product from the stored order; the caller commits."""
    order = load_row_order()
    if order and product_id in order:
        save_row_order(pid for pid in order if pid != product_id)

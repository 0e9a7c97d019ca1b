from __future__ import annotations

from typing import Optional


def visible_count(
    container_height: Optional[float],
    row_height: float,
    row_gap: float,
    total_items: int,
) -> int:
    """
    How many stacked rows fit in a cell before a "+N more" button is needed.

    Example:
        container 140px, rows 30px + 4px gap -> slot 34, fits 4
        total 3 -> 3 (everything fits)
        total 6 -> 3 (one slot kept for "+3 more")

    An unmeasured container (None) or a non-positive slot shows everything.
    """
    if container_height is None:
        return total_items

    slot = row_height + row_gap
    if slot <= 0:
        return total_items

    max_fit = int(container_height // slot)
    if total_items <= max_fit:
        return total_items
    return max(max_fit - 1, 0)


def hidden_count(container_height: Optional[float], row_height: float, row_gap: float, total_items: int) -> int:
    return total_items - visible_count(container_height, row_height, row_gap, total_items)

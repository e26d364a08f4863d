from typing import Iterable, List

from core.models import QueueLineItem

LABEL_NAME_LIMIT = 20


def truncate_name(name: str, limit: int = LABEL_NAME_LIMIT) -> str:
    """
    Shorten a product name to fit on a label.
    Counted in characters, not bytes, so non-latin names are cut cleanly.
    """
    if len(name) <= limit:
        return name
    return name[:limit] + "..."


def label_line(item: QueueLineItem) -> str:
    return ",".join(
        [item.code, truncate_name(item.name), item.price, item.barcode]
    )


def label_lines(items: Iterable[QueueLineItem]) -> List[str]:
    """One data line per physical label, so an item with qty 3 yields 3 lines."""
    lines: List[str] = []
    for item in items:
        lines.extend([label_line(item)] * item.qty)
    return lines

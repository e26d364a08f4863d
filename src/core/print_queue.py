from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from core.errors import BackendError, PrintFailed, PrintInProgress, ValidationRejected
from core.models import NormalizedProduct, QueueLineItem
from utils.logger import get_logger

_logger = get_logger(__name__)

DEFAULT_QTY = "1"
QTY_PATTERN = re.compile(r"[0-9]+")

ChangeListener = Callable[[], None]


def parse_quantity(value: Any, strict: bool = False) -> Optional[int]:
    """
    Parse user input as a positive integer.
    Returns None for anything else, or raises ValidationRejected when strict.
    """
    text = str(value).strip()
    qty = int(text) if QTY_PATTERN.fullmatch(text) else None

    if qty is None or qty <= 0:
        if strict:
            raise ValidationRejected(f"Invalid quantity: {value!r}")
        return None
    return qty


class QueueManager:
    """
    Ordered list of label lines waiting to be printed.

    Every add appends a new line, even for a product that is already queued,
    so one product can be printed in separate batches with different
    quantities. The queue is only ever emptied by a successful print, a reset
    or a logout.
    """

    def __init__(self, backend, session_manager) -> None:
        self._backend = backend
        self._session = session_manager
        self._items: List[QueueLineItem] = []
        self._pending: Dict[str, str] = {}
        self._printing = False
        self._listeners: List[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def items(self) -> Sequence[QueueLineItem]:
        return tuple(self._items)

    @property
    def is_printing(self) -> bool:
        return self._printing

    def __len__(self) -> int:
        return len(self._items)

    # ---------------------------
    # Pending quantities
    # ---------------------------

    @property
    def pending_quantities(self) -> Dict[str, str]:
        return dict(self._pending)

    def set_pending_quantity(self, product_id: str, text: str) -> None:
        self._pending[product_id] = text

    def pending_quantity(self, product_id: str) -> str:
        return self._pending.get(product_id, DEFAULT_QTY)

    def retain_pending(self, product_ids: Iterable[str]) -> None:
        """Keep only entries for the products currently on screen."""
        keep = set(product_ids)
        self._pending = {k: v for k, v in self._pending.items() if k in keep}

    # ---------------------------
    # Queue edits
    # ---------------------------

    def add_to_queue(
        self, product: NormalizedProduct, quantity_input: Any = None
    ) -> Optional[QueueLineItem]:
        if not self._session.is_authenticated:
            _logger.debug("Add to queue without a session, ignored.")
            return None

        if quantity_input is None:
            quantity_input = self.pending_quantity(product.id)
        qty = parse_quantity(quantity_input)
        if qty is None:
            _logger.debug(f"Rejected quantity {quantity_input!r} for {product.code}")
            return None

        item = QueueLineItem.from_product(product, qty)
        self._items.append(item)
        self._pending.pop(product.id, None)
        _logger.info(f"Queued {qty} x {product.code} ({product.name})")
        self._notify()
        return item

    def remove_from_queue(self, index: int) -> Optional[QueueLineItem]:
        if index < 0 or index >= len(self._items):
            return None
        item = self._items.pop(index)
        _logger.info(f"Removed line {index} ({item.code}) from queue")
        self._notify()
        return item

    def total_label_count(self) -> int:
        return sum(item.qty for item in self._items)

    def reset(self) -> None:
        self._items = []
        self._pending = {}
        self._notify()

    # ---------------------------
    # Printing
    # ---------------------------

    async def print(self) -> int:
        """
        Send the whole queue to the printer and return the number of labels
        printed. On failure the queue is left exactly as it was.
        """
        if self._printing:
            raise PrintInProgress("A print job is already in progress.")
        if not self._session.is_authenticated:
            raise PrintFailed("Not logged in.")
        if not self._items:
            _logger.debug("Print requested with an empty queue, ignored.")
            return 0

        batch = list(self._items)
        label_cnt = sum(item.qty for item in batch)
        self._printing = True
        self._notify()
        try:
            await self._backend.print_labels(batch)
        except (PrintFailed, BackendError) as e:
            self._printing = False
            _logger.error(f"Printing {label_cnt} labels failed: {e}")
            self._notify()
            if isinstance(e, PrintFailed):
                raise
            raise PrintFailed(str(e)) from e
        except BaseException:
            self._printing = False
            raise

        self._printing = False
        printed = {id(item) for item in batch}
        self._items = [item for item in self._items if id(item) not in printed]
        _logger.info(f"Printed {label_cnt} labels from {len(batch)} lines")
        self._notify()
        return label_cnt

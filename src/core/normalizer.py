"""
Maps backend records onto the canonical shapes used by the rest of the app.

The backend names the same value differently depending on the endpoint
(``prod_code`` / ``product_code`` / ``code``), so every canonical field is
resolved through an ordered tuple of accessors. The first accessor returning a
non-empty value wins; the order of the tuples is the resolution policy.
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from core.models import Location, NormalizedProduct, RawProductRecord

Accessor = Callable[[Mapping[str, Any]], Any]

CODE_SENTINEL = "N/A"
NAME_SENTINEL = "Unknown"
ZERO_PRICE = Decimal("0.00")
MAX_PRICE_DIGITS = 400  # covers every finite float


def key(name: str) -> Accessor:
    """Accessor reading a single key from a record."""

    def _get(record: Mapping[str, Any]) -> Any:
        return record.get(name)

    _get.__name__ = f"key_{name}"
    return _get


CODE_ACCESSORS: Sequence[Accessor] = (
    key("prod_code"),
    key("product_code"),
    key("code"),
)
NAME_ACCESSORS: Sequence[Accessor] = (
    key("prod_name"),
    key("product_name"),
    key("product_name_en"),
    key("name"),
)
PRICE_ACCESSORS: Sequence[Accessor] = (
    key("selling_price"),
    key("price"),
)
BARCODE_ACCESSORS: Sequence[Accessor] = (key("barcode"), *CODE_ACCESSORS)

LOCATION_VALUE_ACCESSORS: Sequence[Accessor] = (
    key("loca_code"),
    key("code"),
    key("id"),
)
LOCATION_LABEL_ACCESSORS: Sequence[Accessor] = (
    key("loca_name"),
    key("name"),
    key("location_name"),
)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def first_present(
    record: Mapping[str, Any], accessors: Iterable[Accessor], default: Any = None
) -> Any:
    for accessor in accessors:
        value = accessor(record)
        if not _is_empty(value):
            return value
    return default


def format_price(value: Any) -> str:
    """
    Render a monetary amount with exactly two decimals.
    Anything that is not a finite, non-negative number becomes "0.00".
    """
    if isinstance(value, bool) or value is None:
        return str(ZERO_PRICE)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return str(ZERO_PRICE)
    if not amount.is_finite() or amount < 0:
        return str(ZERO_PRICE)
    # integer digits plus the two decimals must fit the context precision
    digits = amount.adjusted() + 3
    if digits > MAX_PRICE_DIGITS:
        return str(ZERO_PRICE)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits)
        try:
            return str(amount.quantize(ZERO_PRICE, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            return str(ZERO_PRICE)


def surrogate_id() -> str:
    return f"local-{uuid.uuid4().hex}"


def normalize_product(record: RawProductRecord) -> NormalizedProduct:
    raw_id = record.get("id")
    has_id = not _is_empty(raw_id)

    return NormalizedProduct(
        id=str(raw_id) if has_id else surrogate_id(),
        code=str(first_present(record, CODE_ACCESSORS, CODE_SENTINEL)),
        name=str(first_present(record, NAME_ACCESSORS, NAME_SENTINEL)),
        price=format_price(first_present(record, PRICE_ACCESSORS, 0)),
        barcode=str(first_present(record, BARCODE_ACCESSORS, CODE_SENTINEL)),
        surrogate_id=not has_id,
    )


def normalize_products(records: Iterable[RawProductRecord]) -> List[NormalizedProduct]:
    """Normalize a result set, keeping the order the backend returned."""
    return [normalize_product(r) for r in records if isinstance(r, Mapping)]


# ---------------------------
# Locations
# ---------------------------


def normalize_location(record: Mapping[str, Any]) -> Optional[Location]:
    value = first_present(record, LOCATION_VALUE_ACCESSORS)
    if value is None:
        return None
    label = first_present(
        record, LOCATION_LABEL_ACCESSORS, f"Location {record.get('id')}"
    )
    return Location(value=str(value), label=str(label))


def unwrap_locations(response: Any) -> List[Location]:
    """
    Accepts either a bare list of location records or the
    ``{"success": true, "data": [...]}`` wrapper. Anything else is empty.
    """
    if isinstance(response, Mapping):
        if response.get("success") and isinstance(response.get("data"), list):
            records = response["data"]
        else:
            return []
    elif isinstance(response, list):
        records = response
    else:
        return []

    locations = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        location = normalize_location(record)
        if location is not None:
            locations.append(location)
    return locations

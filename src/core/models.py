# provide dataclass models

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional

RawProductRecord = Mapping[str, Any]


@dataclass(frozen=True)
class Session:
    token: Optional[str] = None
    user: Any = None
    selected_location: Optional[str] = None  # None -> server default

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


@dataclass(frozen=True)
class Location:
    value: str
    label: str


@dataclass(frozen=True)
class NormalizedProduct:
    id: str
    code: str
    name: str
    price: str  # always two decimals, e.g. "12.50"
    barcode: str
    surrogate_id: bool = field(default=False, compare=False)


@dataclass(frozen=True)
class QueueLineItem:
    id: str
    code: str
    name: str
    price: str
    barcode: str
    qty: int

    @classmethod
    def from_product(cls, product: NormalizedProduct, qty: int) -> "QueueLineItem":
        return cls(
            id=product.id,
            code=product.code,
            name=product.name,
            price=product.price,
            barcode=product.barcode,
            qty=qty,
        )

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)

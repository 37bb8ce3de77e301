"""Bin catalog: the immutable list of stock bins and an id index over it."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Optional, Tuple

from drawerlayout.state import Size

BinCategory = str

# (width, length) in inches
STOCK_SIZES: List[Tuple[int, int]] = [
    (2, 2), (2, 4), (2, 6), (2, 8), (2, 10),
    (4, 2), (4, 4), (4, 6), (4, 8), (4, 10),
    (6, 2), (6, 4), (6, 6), (6, 8), (6, 10),
    (8, 2), (8, 4), (8, 6), (8, 8), (8, 10),
]
STOCK_HEIGHT = 2


@dataclass(frozen=True)
class BinSpec:
    """A catalog entry. ``height`` is cosmetic and never used for placement."""

    id: str
    width: float
    length: float
    height: float = STOCK_HEIGHT
    name: str = ""
    category: BinCategory = "small"

    @property
    def size(self) -> Size:
        return Size(self.width, self.length)


def categorize(width: float, length: float) -> BinCategory:
    longest = max(width, length)
    if longest <= 4:
        return "small"
    if longest <= 6:
        return "medium"
    return "large"


class CatalogIndex:
    """Read-only id -> BinSpec lookup that preserves catalog order."""

    def __init__(self, bins: Iterable[BinSpec]) -> None:
        ordered = tuple(bins)
        by_id = {}
        for spec in ordered:
            if spec.id in by_id:
                raise ValueError(f"Duplicate bin id '{spec.id}' in catalog")
            by_id[spec.id] = spec
        self._bins = ordered
        self._by_id = MappingProxyType(by_id)

    def get(self, bin_id: str) -> Optional[BinSpec]:
        return self._by_id.get(bin_id)

    def require(self, bin_id: str) -> BinSpec:
        try:
            return self._by_id[bin_id]
        except KeyError:
            raise LookupError(f"Unknown bin id '{bin_id}'") from None

    def __contains__(self, bin_id: object) -> bool:
        return bin_id in self._by_id

    def __iter__(self) -> Iterator[BinSpec]:
        return iter(self._bins)

    def __len__(self) -> int:
        return len(self._bins)

    @property
    def bins(self) -> Tuple[BinSpec, ...]:
        return self._bins


def default_catalog() -> CatalogIndex:
    """Build the stock catalog of 2"-high bins."""

    return CatalogIndex(
        BinSpec(
            id=f"bin-{w}x{l}",
            name=f"{w}x{l} Bin",
            width=w,
            length=l,
            height=STOCK_HEIGHT,
            category=categorize(w, l),
        )
        for w, l in STOCK_SIZES
    )


def override_ceiling(spec: BinSpec, max_dim: float) -> Size:
    """Largest width/length override allowed for ``spec``.

    Stock 10" bins exceed the general bin range; an override equal to the
    bin's own size is always accepted.
    """
    return Size(max(max_dim, spec.width), max(max_dim, spec.length))

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union
from .errors import QuoteNotFoundError
from enum import Enum


class InstrumentClass(str, Enum):
    DEFAULT = "default"
    CEDEAR = "cedear"

    @classmethod
    def parse(
        cls,
        value: Union[str, "InstrumentClass", None]
    ) -> "InstrumentClass":
        """
        Accept an enum member or its name; ``"cedears"`` and ``None`` are
        tolerated for convenience.

        Raises
        ------
        ValueError
            If the value names no known class.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.DEFAULT
        normalized = str(value).strip().lower()
        if normalized == "cedears":
            normalized = cls.CEDEAR.value
        return cls(normalized)


@dataclass(frozen=True)
class QuoteRequest:
    """
    Instrument to look up. The code is only stripped of surrounding
    whitespace and is sent upstream as given.
    """

    instrument_code: str
    instrument_class: InstrumentClass = InstrumentClass.DEFAULT

    def __post_init__(self) -> None:
        if not self.instrument_code or not str(self.instrument_code).strip():
            raise ValueError("A valid instrument code must be provided.")
        object.__setattr__(
            self, "instrument_code", str(self.instrument_code).strip()
        )
        object.__setattr__(
            self,
            "instrument_class",
            InstrumentClass.parse(self.instrument_class),
        )


@dataclass(frozen=True)
class PriceLevel:
    price: float
    size: float


@dataclass(frozen=True)
class QuoteSnapshot:
    """
    One normalized quote for an instrument.

    ``bids`` and ``asks`` are sorted ascending by price; levels with equal
    prices keep the order the upstream sent them in. ``raw`` holds the
    unwrapped upstream object untouched.
    """

    short_ticker: Optional[str]
    long_ticker: Optional[str]
    instrument_code: Optional[str]
    instrument_name: Optional[str]
    instrument_type: Optional[str]
    currency: Optional[str]
    tick_size: Optional[float]
    price_factor: Optional[float]
    settlement_days: Optional[int]
    id_segment: Optional[str]
    id_session: Optional[str]
    last: Optional[float]
    prev_close: Optional[float]
    volume: Optional[float]
    turnover: Optional[float]
    bids: Tuple[PriceLevel, ...] = ()
    asks: Tuple[PriceLevel, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False,
                                repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "QuoteSnapshot":
        """Unwrap and normalize an upstream quote response."""
        data = unwrap_payload(payload)
        return cls(
            short_ticker=data.get("short_ticker"),
            long_ticker=data.get("long_ticker"),
            instrument_code=data.get("instrument_code"),
            instrument_name=data.get("instrument_name"),
            instrument_type=data.get("instrument_type"),
            currency=data.get("currency"),
            tick_size=data.get("tick_size"),
            price_factor=data.get("price_factor"),
            settlement_days=data.get("settlement_days"),
            id_segment=data.get("id_segment"),
            id_session=data.get("id_session"),
            last=data.get("last"),
            prev_close=data.get("prev_close"),
            volume=data.get("volume"),
            turnover=data.get("turnover"),
            bids=sort_levels(data.get("bids")),
            asks=sort_levels(data.get("asks")),
            raw=data,
        )


def unwrap_payload(payload: Any) -> Dict[str, Any]:
    """
    Reduce a quote response to a single object.

    The endpoints answer either with a bare object or with a one-element
    array; the first element of an array is used.

    Raises
    ------
    QuoteNotFoundError
        If the response is an empty array.
    TypeError
        If the response is neither an object nor an array of objects.
    """
    if isinstance(payload, (list, tuple)):
        if not payload:
            raise QuoteNotFoundError("Quote endpoint returned no results")
        payload = payload[0]

    if not isinstance(payload, dict):
        raise TypeError(
            f"Unexpected quote payload type: {type(payload).__name__}"
        )
    return payload


def sort_levels(
    levels: Optional[Iterable[Dict[str, Any]]]
) -> Tuple[PriceLevel, ...]:
    """
    Convert raw ``{price, size}`` levels and sort them ascending by price.

    ``sorted`` is stable, so equal prices keep their upstream order. Levels
    without a price sort after all priced ones; non-object entries are
    dropped.
    """
    parsed = [
        PriceLevel(price=level.get("price"), size=level.get("size"))
        for level in (levels or [])
        if isinstance(level, dict)
    ]
    return tuple(sorted(
        parsed,
        key=lambda level: (
            level.price is None,
            0 if level.price is None else level.price,
        ),
    ))

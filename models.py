from dataclasses import dataclass


@dataclass(frozen=True)
class LineItem:
    short_description: str
    price_cents: int


@dataclass(frozen=True)
class Receipt:
    """
    A normalized receipt, ready to be scored.

    Purchase date and time keep the submitted text; scoring parses them and
    skips the date/time rules when they do not parse. The total is scored as
    stated and never checked against the item prices.
    """
    retailer: str
    purchase_date: str
    purchase_time: str
    items: tuple[LineItem, ...]
    total_cents: int

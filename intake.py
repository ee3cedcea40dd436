import logging
from typing import Callable, Optional
from uuid import uuid4

from models import LineItem, Receipt
from money import parse_cents
from points import calculate_points
from store import ReceiptStore

logger = logging.getLogger(__name__)

text_receipt_attributes = ["retailer", "purchaseDate", "purchaseTime", "total"]
item_attributes = ["shortDescription", "price"]


def new_receipt_id() -> str:
    return str(uuid4())


def validate_receipt_json_structure(receipt):
    """
    Validates the types in the submitted json. Missing or null attributes are
    allowed and read as empty values by parse_receipt.
    """
    if not isinstance(receipt, dict):
        raise ValueError("Error: invalid request body")
    for attribute in text_receipt_attributes:
        value = receipt.get(attribute)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Error: invalid {attribute} format")

    items = receipt.get("items")
    if items is None:
        return
    if not isinstance(items, list):
        raise ValueError("Error: invalid receipt items list format")
    for item in items:
        if not isinstance(item, dict):
            raise ValueError("Error: invalid receipt item format")
        for attribute in item_attributes:
            value = item.get(attribute)
            if value is not None and not isinstance(value, str):
                raise ValueError("Error: invalid receipt item format")


def text_attribute(source: dict, attribute: str) -> str:
    return source.get(attribute) or ""


def parse_receipt(receipt: dict) -> Receipt:
    """ Trims text fields and converts every price and the total to cents """
    items = []
    for number, item in enumerate(receipt.get("items") or [], start=1):
        price_cents = parse_cents(text_attribute(item, "price"), field=f"item {number} price")
        items.append(LineItem(short_description=text_attribute(item, "shortDescription").strip(),
                              price_cents=price_cents))
    total_cents = parse_cents(text_attribute(receipt, "total"), field="receipt total")
    return Receipt(retailer=text_attribute(receipt, "retailer").strip(),
                   purchase_date=text_attribute(receipt, "purchaseDate").strip(),
                   purchase_time=text_attribute(receipt, "purchaseTime").strip(),
                   items=tuple(items),
                   total_cents=total_cents)


def submit_receipt(receipt: dict, store: ReceiptStore,
                   generate_id: Optional[Callable[[], str]] = None) -> str:
    """
    Validates and scores a submitted receipt, stores its points under a new id
    and returns that id. Raises ValueError (InvalidAmount for prices and the
    total) when the submission is rejected; nothing is stored in that case.
    """
    validate_receipt_json_structure(receipt)
    parsed = parse_receipt(receipt)
    points = calculate_points(parsed)
    receipt_id = (generate_id or new_receipt_id)()
    store.put(receipt_id, points)
    logger.info("Stored %d points for receipt %s", points, receipt_id)
    return receipt_id

import logging
import re
from datetime import date, datetime, time
from typing import NamedTuple, Optional, Sequence

from models import LineItem, Receipt

logger = logging.getLogger(__name__)

RECEIPT_DATE_FORMAT = '%Y-%m-%d'
RECEIPT_TIME_FORMAT = '%H:%M'
RECEIPT_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
RECEIPT_TIME_PATTERN = re.compile(r"\d{2}:\d{2}", re.ASCII)
POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_ITEMS_COUNT = 5
POINTS_ODD_PURCHASE_DAY = 6
POINTS_VALID_PURCHASE_HOUR = 10
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
# 0.2 points per dollar, i.e. one point per started 500 cents
REWARD_ITEM_DESCRIPTION_CENTS_PER_POINT = 500
CENTS_PER_DOLLAR = 100
CENTS_PER_QUARTER = 25


class RewardWindow(NamedTuple):
    """ Time-of-day window, both ends exclusive """
    start: time
    end: time

    def __contains__(self, moment: time) -> bool:
        return self.start < moment < self.end


REWARD_WINDOW = RewardWindow(time(14, 0), time(16, 0))


def count_alphanumeric(text: str) -> int:
    """ Counts ASCII letters and digits; accented or non-Latin letters do not count """
    return sum(1 for c in text if c.isascii() and c.isalnum())


def score_retailer(retailer_name: str) -> int:
    return count_alphanumeric(retailer_name) * POINTS_RETAILER_NAME_ALPHANUM_CHARACTER


def score_total(total_cents: int) -> int:
    """ Round dollar and multiple-of-a-quarter bonuses, which can both apply """
    points = 0
    if total_cents % CENTS_PER_DOLLAR == 0:
        points += POINTS_TOTAL_HAS_NO_CENTS
    if total_cents % CENTS_PER_QUARTER == 0:
        points += POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS
    return points


def score_item_description(item: LineItem) -> int:
    if len(item.short_description.strip()) % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR != 0:
        return 0
    # ceil(price_cents / 500) without going through floats
    return -(-item.price_cents // REWARD_ITEM_DESCRIPTION_CENTS_PER_POINT)


def score_items(items: Sequence[LineItem]) -> int:
    """ Points for every pair of items plus the description length bonus of each item """
    points = (len(items) // 2) * POINTS_ITEMS_COUNT
    for item in items:
        points += score_item_description(item)
    return points


def parse_purchase_date(purchase_date: str) -> Optional[date]:
    """ Zero-padded YYYY-MM-DD in ASCII digits, anything else is None """
    try:
        if not RECEIPT_DATE_PATTERN.fullmatch(purchase_date):
            raise ValueError(f"not zero-padded {RECEIPT_DATE_FORMAT}")
        return datetime.strptime(purchase_date, RECEIPT_DATE_FORMAT).date()
    except ValueError:
        logger.debug("Unparseable purchase date (%s), skipping date rules", purchase_date)
        return None


def parse_purchase_time(purchase_time: str) -> Optional[time]:
    try:
        if not RECEIPT_TIME_PATTERN.fullmatch(purchase_time):
            raise ValueError(f"not zero-padded {RECEIPT_TIME_FORMAT}")
        return datetime.strptime(purchase_time, RECEIPT_TIME_FORMAT).time()
    except ValueError:
        logger.debug("Unparseable purchase time (%s), skipping time rule", purchase_time)
        return None


def score_date_time(purchase_date: str, purchase_time: str, reward_window: RewardWindow = REWARD_WINDOW) -> int:
    """
    Odd purchase day and afternoon purchase bonuses.

    The time is only looked at once the date parsed. Whatever does not parse
    scores nothing instead of failing the receipt.
    """
    purchased_on = parse_purchase_date(purchase_date)
    if purchased_on is None:
        return 0
    points = 0
    if purchased_on.day % 2 != 0:
        points += POINTS_ODD_PURCHASE_DAY
    purchased_at = parse_purchase_time(purchase_time)
    if purchased_at is not None and purchased_at in reward_window:
        points += POINTS_VALID_PURCHASE_HOUR
    return points


def calculate_points(receipt: Receipt, reward_window: RewardWindow = REWARD_WINDOW) -> int:
    """ Calculates points earned from each component of the receipt """
    points = 0
    points += score_retailer(receipt.retailer)
    points += score_total(receipt.total_cents)
    points += score_items(receipt.items)
    points += score_date_time(receipt.purchase_date, receipt.purchase_time, reward_window)
    return points

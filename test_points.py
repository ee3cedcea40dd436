from datetime import date, time

import pytest

from models import LineItem, Receipt
from points import (REWARD_WINDOW, RewardWindow, calculate_points, count_alphanumeric, parse_purchase_date,
                    parse_purchase_time, score_date_time, score_items, score_total)


def make_receipt(retailer="TestRetailer", purchase_date="2022-01-02", purchase_time="15:00", items=(),
                 total_cents=1234):
    return Receipt(retailer=retailer, purchase_date=purchase_date, purchase_time=purchase_time,
                   items=tuple(items), total_cents=total_cents)


example_items = [
    LineItem("Mountain Dew 12PK", 649),
    LineItem("Emils Cheese Pizza", 1225),
    LineItem("Knorr Creamy Chicken", 126),
    LineItem("Doritos Nacho Cheese", 335),
    LineItem("Klarbrunn 12-PK 12 FL OZ", 1200),
]


@pytest.mark.parametrize("receipt, expected_points", [
    (make_receipt("Target", "2022-01-01", "13:01", example_items, 3535), 28),
    (make_receipt(purchase_time="15:30", total_cents=1000), 50 + 25 + 10 + 12),
    (make_receipt(purchase_time="10:00", total_cents=75), 25 + 12),
    (make_receipt(purchase_date="2022-01-03", purchase_time="10:00"), 6 + 12),
    (make_receipt(), 10 + 12),
    (make_receipt("", total_cents=100), 50 + 25 + 10),
    (make_receipt(items=[LineItem("Test Item", 100)]), 10 + 1 + 12),
    (make_receipt(items=[LineItem(f"Item {n}", n * 100) for n in range(1, 7)]), 10 + 15 + 12 + 7),
    (make_receipt(items=[LineItem("ABC", 151)]), 10 + 12 + 1),
    (make_receipt(items=[LineItem("ABCD", 100)]), 10 + 12),
    (make_receipt("Tárgét", "2022-01-01", "13:01", total_cents=100), 50 + 25 + 6 + 4),
    (make_receipt(purchase_date="invalid-date", purchase_time="13:01", total_cents=10), 12),
    (make_receipt(purchase_date="2024-01-01", purchase_time="invalid-time", total_cents=10), 6 + 12),
    (make_receipt("M&M Corner Market", "2022-03-20", "14:33", [LineItem("Gatorade", 225)] * 4, 900), 109),
])
def test_calculate_points(receipt, expected_points):
    assert calculate_points(receipt) == expected_points


@pytest.mark.parametrize("text, expected", [
    ("Target", 6),
    ("M&M Corner Market", 14),
    ("", 0),
    ("   \t", 0),
    ("Tárgét", 4),
    ("Ωmega 7", 5),
    ("１２３", 0),
    ("a-b_c.9!", 4),
])
def test_count_alphanumeric_ascii_only(text, expected):
    assert count_alphanumeric(text) == expected


@pytest.mark.parametrize("total_cents, expected", [
    (0, 75),
    (100, 75),
    (900, 75),
    (125, 25),
    (350, 25),
    (3535, 0),
    (101, 0),
])
def test_score_total_rules_apply_independently(total_cents, expected):
    assert score_total(total_cents) == expected


@pytest.mark.parametrize("price_cents, expected", [
    (0, 0),
    (1, 1),
    (499, 1),
    (500, 1),
    (501, 2),
    (1000, 2),
    (1225, 3),
])
def test_description_bonus_rounds_up_at_cent_boundary(price_cents, expected):
    assert score_items([LineItem("abc", price_cents)]) == expected


def test_description_bonus_uses_trimmed_length():
    assert score_items([LineItem("   Klarbrunn 12-PK 12 FL OZ  ", 1200)]) == 3
    assert score_items([LineItem("  ab  ", 1200)]) == 0


def test_empty_description_is_a_multiple_of_three():
    assert score_items([LineItem("", 600)]) == 2
    assert score_items([LineItem("    ", 600)]) == 2


def test_item_pairs():
    items = [LineItem("ab", 100)] * 5
    assert score_items(items) == 10
    assert score_items(items[:1]) == 0
    assert score_items([]) == 0


def test_points_invariant_under_item_order():
    receipt = make_receipt("Target", "2022-01-01", "13:01", example_items, 3535)
    reordered = make_receipt("Target", "2022-01-01", "13:01", reversed(example_items), 3535)
    assert calculate_points(receipt) == calculate_points(reordered)


def test_unparseable_date_skips_only_date_and_time_rules():
    receipt = make_receipt("M&M Corner Market", "2022-03-21", "14:33", [LineItem("Gatorade", 225)] * 4, 900)
    undated = make_receipt("M&M Corner Market", "03/21/2022", "14:33", [LineItem("Gatorade", 225)] * 4, 900)
    assert calculate_points(receipt) == 109 + 6
    assert calculate_points(undated) == 14 + 50 + 25 + 10


@pytest.mark.parametrize("purchase_time, expected", [
    ("13:59", 0),
    ("14:00", 0),
    ("14:01", 10),
    ("15:00", 10),
    ("15:59", 10),
    ("16:00", 0),
    ("23:59", 0),
    ("15:5", 0),
    ("1:30", 0),
])
def test_afternoon_window_is_exclusive(purchase_time, expected):
    assert score_date_time("2022-01-02", purchase_time) == expected


def test_time_ignored_without_parseable_date():
    assert score_date_time("2022-13-40", "15:00") == 0


def test_reward_window_is_passed_in():
    morning = RewardWindow(time(8, 0), time(9, 0))
    assert score_date_time("2022-01-02", "08:30", morning) == 10
    assert score_date_time("2022-01-02", "15:00", morning) == 0
    receipt = make_receipt(purchase_time="08:30")
    assert calculate_points(receipt, morning) == calculate_points(receipt, REWARD_WINDOW) + 10


def test_parse_purchase_date_and_time():
    assert parse_purchase_date("2022-03-20") == date(2022, 3, 20)
    assert parse_purchase_date("2022-02-30") is None
    assert parse_purchase_date("") is None
    assert parse_purchase_time("14:33") == time(14, 33)
    assert parse_purchase_time("24:00") is None
    assert parse_purchase_time("2pm") is None
    assert parse_purchase_date("2022-1-3") is None
    assert parse_purchase_date("2022-01-3") is None
    assert parse_purchase_date("２０２２-01-03") is None
    assert parse_purchase_time("14:5") is None
    assert parse_purchase_time("9:30") is None


def test_unpadded_date_and_time_score_nothing():
    assert calculate_points(Receipt("", "2022-1-3", "15:5", (), 1)) == 0
    assert score_date_time("2022-01-03", "15:5") == 6

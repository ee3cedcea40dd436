import json
import logging
import sys
import uuid
import pytest
from concurrent.futures import ThreadPoolExecutor
from app import create_app
from config import TestingConfig

valid_receipts = {
    json.dumps({
        "retailer": "Target",
        "purchaseDate": "2022-01-01",
        "purchaseTime": "13:01",
        "items": [
            {
                "shortDescription": "Mountain Dew 12PK",
                "price": "6.49"
            }, {
                "shortDescription": "Emils Cheese Pizza",
                "price": "12.25"
            }, {
                "shortDescription": "Knorr Creamy Chicken",
                "price": "1.26"
            }, {
                "shortDescription": "Doritos Nacho Cheese",
                "price": "3.35"
            }, {
                "shortDescription": "   Klarbrunn 12-PK 12 FL OZ  ",
                "price": "12.00"
            }
        ],
        "total": "35.35"
    }): 28,
    json.dumps({
        "retailer": "M&M Corner Market",
        "purchaseDate": "2022-03-20",
        "purchaseTime": "14:33",
        "items": [
            {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }
        ],
        "total": "9.00"
    }): 109,
    json.dumps({
        "retailer": "Walgreens",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "08:13",
        "total": "2.65",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "price": "1.25"},
            {"shortDescription": "Dasani", "price": "1.40"}
        ]
    }): 15,
    json.dumps({
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "price": "1.25"}
        ]
    }): 31,
    json.dumps({
        "retailer": "",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "15:00",
        "total": "1",
        "items": []
    }): 85
}

text_receipt_attributes = ["retailer", "total", "purchaseDate", "purchaseTime"]


@pytest.fixture
def app():
    return create_app(config=TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def simple_receipt_skeleton():
    return {
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "price": "1.25"}
        ]
    }


def post_receipt(client, receipt):
    return client.post('/receipts/process', content_type='application/json', data=json.dumps(receipt))


def test_process_valid_receipts(client):
    for test_json, expected_points in valid_receipts.items():
        expected = {"points": expected_points}
        process_response = client.post('/receipts/process', content_type='application/json', data=test_json)
        assert process_response.status_code == 200
        receipt_id = json.loads(process_response.data)["id"]
        uuid.UUID(receipt_id)
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert get_response.status_code == 200
        assert expected == json.loads(get_response.data)


def test_process_receipts_unique_ids(client, simple_receipt_skeleton):
    receipt_ids = []
    for i in range(10):
        process_response = post_receipt(client, simple_receipt_skeleton)
        receipt_ids.append(json.loads(process_response.data)["id"])
    assert len(set(receipt_ids)) == len(receipt_ids)


def test_process_receipt_stores_points(app, client, simple_receipt_skeleton):
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    store = app.extensions["receipt_store"]
    assert receipt_id in store
    assert store.get(receipt_id) == 31


def test_process_receipt_with_injected_store_and_ids(simple_receipt_skeleton):
    class RecordingStore:
        def __init__(self):
            self.saved = {}

        def put(self, receipt_id, points):
            self.saved[receipt_id] = points

        def get(self, receipt_id):
            return self.saved[receipt_id]

    store = RecordingStore()
    client = create_app(store=store, generate_id=lambda: "receipt-1", config=TestingConfig).test_client()
    process_response = post_receipt(client, simple_receipt_skeleton)
    assert json.loads(process_response.data) == {"id": "receipt-1"}
    assert store.saved == {"receipt-1": 31}


def test_process_receipts_trims_text_fields(client, simple_receipt_skeleton):
    simple_receipt_skeleton["retailer"] = "  Target  "
    simple_receipt_skeleton["purchaseDate"] = " 2022-01-01 "
    simple_receipt_skeleton["purchaseTime"] = " 14:30 "
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    get_response = client.get(f'/receipts/{receipt_id}/points')
    assert json.loads(get_response.data) == {"points": 31 + 6 + 10}


def test_process_receipts_unparseable_purchase_date(client, simple_receipt_skeleton):
    invalid_dates = ["test", "0000-01-01", "2023-15-15", "2023-10-99", "dummydummydummy", "", '9999-99-99']
    simple_receipt_skeleton["purchaseTime"] = "15:00"
    for date in invalid_dates:
        simple_receipt_skeleton["purchaseDate"] = date
        process_response = post_receipt(client, simple_receipt_skeleton)
        assert process_response.status_code == 200
        receipt_id = json.loads(process_response.data)["id"]
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert json.loads(get_response.data) == {"points": 31}


def test_process_receipts_unparseable_purchase_time(client, simple_receipt_skeleton):
    invalid_times = ["test", "13:99", "99:13", "99:99", "dummydummydummy", "", '13-13']
    simple_receipt_skeleton["purchaseDate"] = "2022-01-01"
    for time in invalid_times:
        simple_receipt_skeleton["purchaseTime"] = time
        process_response = post_receipt(client, simple_receipt_skeleton)
        assert process_response.status_code == 200
        receipt_id = json.loads(process_response.data)["id"]
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert json.loads(get_response.data) == {"points": 31 + 6}


def test_process_receipts_missing_attributes_read_as_empty(client):
    process_response = post_receipt(client, {})
    assert process_response.status_code == 200
    receipt_id = json.loads(process_response.data)["id"]
    get_response = client.get(f'/receipts/{receipt_id}/points')
    # an empty total is zero cents: round dollar and quarter bonuses
    assert json.loads(get_response.data) == {"points": 75}


def test_process_receipts_invalid_body(client):
    expected = {"error": "Error: invalid request body"}
    for body in ["not json", "[1, 2]", "\"receipt\""]:
        process_response = client.post('/receipts/process', content_type='application/json', data=body)
        assert process_response.status_code == 400
        assert json.loads(process_response.data) == expected
    process_response = client.post('/receipts/process', content_type='text/plain', data="{}")
    assert process_response.status_code == 400
    assert json.loads(process_response.data) == expected


def test_process_receipts_invalid_attribute_formats_except_items(client, simple_receipt_skeleton):
    invalid_elements = [[], 25, 3.88, {}, True]
    for attribute in text_receipt_attributes:
        original = simple_receipt_skeleton[attribute]
        expected = {"error": f"Error: invalid {attribute} format"}
        for elem in invalid_elements:
            simple_receipt_skeleton[attribute] = elem
            process_response = post_receipt(client, simple_receipt_skeleton)
            assert process_response.status_code == 400
            assert json.loads(process_response.data) == expected
        simple_receipt_skeleton[attribute] = original


def test_process_receipts_invalid_items_format(client, simple_receipt_skeleton):
    invalid_elements = [25, 3.88, {}, "", "items"]
    expected = {"error": "Error: invalid receipt items list format"}
    for elem in invalid_elements:
        simple_receipt_skeleton["items"] = elem
        process_response = post_receipt(client, simple_receipt_skeleton)
        assert process_response.status_code == 400
        assert json.loads(process_response.data) == expected


def test_process_receipts_empty_items_list(client, simple_receipt_skeleton):
    simple_receipt_skeleton["items"] = []
    process_response = post_receipt(client, simple_receipt_skeleton)
    assert process_response.status_code == 200


def test_process_receipts_invalid_item_formats(client, simple_receipt_skeleton):
    expected = {"error": "Error: invalid receipt item format"}
    for elem in [None, 25, 3.88, [], ""]:
        simple_receipt_skeleton["items"] = [elem]
        process_response = post_receipt(client, simple_receipt_skeleton)
        assert process_response.status_code == 400
        assert json.loads(process_response.data) == expected
    for attribute in ["shortDescription", "price"]:
        for elem in [25, 3.88, [], {}]:
            item = {"shortDescription": "Pepsi - 12-oz", "price": "1.25"}
            item[attribute] = elem
            simple_receipt_skeleton["items"] = [item]
            process_response = post_receipt(client, simple_receipt_skeleton)
            assert process_response.status_code == 400
            assert json.loads(process_response.data) == expected


def test_process_receipts_invalid_item_price(client, simple_receipt_skeleton):
    invalid_prices = ["test", "5.310", "1.2.3", "-1.00", "1,000.00", "12.ab", "$3.00"]
    simple_receipt_skeleton["items"].append({"shortDescription": "Dasani", "price": "1.40"})
    for price in invalid_prices:
        expected = {"error": f"Error: invalid item 2 price ({price})"}
        simple_receipt_skeleton["items"][1]["price"] = price
        process_response = post_receipt(client, simple_receipt_skeleton)
        assert process_response.status_code == 400
        assert json.loads(process_response.data) == expected


def test_process_receipts_invalid_total(client, simple_receipt_skeleton):
    invalid_totals = ["test", "5.310", "1.2.3", "-1.00", "1,000.00", "12.ab", "$3.00"]
    for total in invalid_totals:
        expected = {"error": f"Error: invalid receipt total ({total})"}
        simple_receipt_skeleton["total"] = total
        process_response = post_receipt(client, simple_receipt_skeleton)
        assert process_response.status_code == 400
        assert json.loads(process_response.data) == expected


@pytest.mark.skipif(not getattr(sys, "get_int_max_str_digits", lambda: 0)(),
                    reason="no int string conversion limit")
def test_process_receipts_oversized_total(client, simple_receipt_skeleton):
    total = "1" * (sys.get_int_max_str_digits() + 1)
    simple_receipt_skeleton["total"] = total
    process_response = post_receipt(client, simple_receipt_skeleton)
    assert process_response.status_code == 400
    assert json.loads(process_response.data) == {"error": f"Error: invalid receipt total ({total})"}


def test_rejected_receipt_is_not_stored(app, client, simple_receipt_skeleton):
    simple_receipt_skeleton["total"] = "test"
    post_receipt(client, simple_receipt_skeleton)
    assert len(app.extensions["receipt_store"]) == 0


def test_get_points_nonexistent_id(client):
    res = client.get('/receipts/test/points')
    assert res.status_code == 404
    expected = {'error': 'Error: receipt id not found (test)'}
    assert json.loads(res.data) == expected


def test_get_points_idempotency(client, simple_receipt_skeleton):
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    for i in range(5):
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert get_response.status_code == 200
        assert json.loads(get_response.data)["points"] == 31


def test_process_receipts_concurrency(app, client, simple_receipt_skeleton):
    params = [simple_receipt_skeleton] * 300

    def test_post(json_param):
        return client.post('/receipts/process', json=json_param).get_json()["id"]

    with ThreadPoolExecutor(max_workers=50) as pool:
        receipt_ids = list(pool.map(test_post, params))
    assert len(set(receipt_ids)) == len(params)
    assert len(app.extensions["receipt_store"]) == len(params)


def test_get_points_concurrency(client, simple_receipt_skeleton):
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    params = [receipt_id] * 300

    def test_get(id_param):
        return client.get(f'/receipts/{id_param}/points').get_json()["points"]

    with ThreadPoolExecutor(max_workers=50) as pool:
        assert set(pool.map(test_get, params)) == {31}


def test_create_app_leaves_root_logger_alone():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    create_app(config=TestingConfig)
    assert root_logger.handlers == handlers
    assert root_logger.level == level

import logging
from typing import Callable, Optional

from flask import Flask, request, jsonify

from config import Config
from intake import submit_receipt
from store import InMemoryReceiptStore, ReceiptNotFound, ReceiptStore

logger = logging.getLogger(__name__)


def create_app(store: Optional[ReceiptStore] = None,
               generate_id: Optional[Callable[[], str]] = None,
               config=Config) -> Flask:
    """
    Builds the receipt points application. `store` keeps the
    (receipt id -> reward points) mapping and defaults to process memory;
    `generate_id` produces receipt ids and defaults to uuid4 strings.
    """
    app = Flask(__name__)
    app.config.from_object(config)

    receipts = store if store is not None else InMemoryReceiptStore()
    app.extensions["receipt_store"] = receipts

    @app.before_request
    def log_request():
        logger.info("Received request: %s %s", request.method, request.path)

    @app.route('/receipts/process', methods=['POST'])
    def process_receipt():
        """
        Router for receipt processing requests. The input JSON is validated,
        points are calculated for the receipt and stored under a newly
        generated id, which is returned to the user.

        Returns:
            400 Error if input JSON is invalid
            200 OK and generated receipt id if input JSON is valid
        """
        receipt = request.get_json(silent=True)
        if receipt is None:
            logger.warning("Rejected receipt: request body is not json")
            return jsonify({"error": "Error: invalid request body"}), 400
        try:
            receipt_id = submit_receipt(receipt, receipts, generate_id)
        except ValueError as e:
            logger.warning("Rejected receipt: %s", e)
            return jsonify({"error": str(e)}), 400
        return jsonify({"id": receipt_id})

    @app.route('/receipts/<receipt_id>/points', methods=['GET'])
    def get_points(receipt_id):
        """
        Router for points lookups by receipt id.

        Returns:
            404 Error if the receipt id is not found
            200 OK and the calculated points for the receipt if the id is stored
        """
        try:
            points = receipts.get(receipt_id)
        except ReceiptNotFound:
            logger.info("Receipt not found: %s", receipt_id)
            return jsonify({"error": f"Error: receipt id not found ({receipt_id})"}), 404
        return jsonify({"points": points})

    return app


flask_app = create_app()


if __name__ == '__main__':
    logging.basicConfig(level=Config.LOG_LEVEL, format=Config.LOG_FORMAT)
    flask_app.run(host=Config.HOST, port=Config.PORT, threaded=True)
    # threaded=True lets Flask handle requests concurrently

from typing import Dict, Protocol


class ReceiptNotFound(KeyError):
    """ No points are stored for the requested receipt id """

    def __init__(self, receipt_id: str):
        self.receipt_id = receipt_id
        super().__init__(receipt_id)


class ReceiptStore(Protocol):
    def put(self, receipt_id: str, points: int) -> None:
        ...

    def get(self, receipt_id: str) -> int:
        ...


class InMemoryReceiptStore:
    """ Keeps the (receipt id -> reward points) mapping in process memory """

    def __init__(self):
        self._points: Dict[str, int] = {}

    def put(self, receipt_id: str, points: int) -> None:
        # Ids are generated fresh for every submission, so writes only ever add
        # new keys and a single dict assignment needs no lock.
        self._points[receipt_id] = points

    def get(self, receipt_id: str) -> int:
        try:
            return self._points[receipt_id]
        except KeyError:
            raise ReceiptNotFound(receipt_id) from None

    def __contains__(self, receipt_id: str) -> bool:
        return receipt_id in self._points

    def __len__(self) -> int:
        return len(self._points)

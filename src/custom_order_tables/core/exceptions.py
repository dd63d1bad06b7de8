"""Exceptions raised by the order table layer."""


class OrderTablesError(Exception):
    """Base class for order table errors."""


class DuplicateOrderRecordError(OrderTablesError):
    """An order record already exists for this order ID.

    Raised when an insert into the orders table violates the unique
    constraint on ``order_id`` (or ``order_key``). The underlying
    ``IntegrityError`` is chained as ``__cause__``.
    """

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order record already exists for order {order_id}")

"""Exceptions spécifiques au module Customers."""
from opsflow.core.exceptions import NotFoundError


class CustomerNotFoundException(NotFoundError):
    def __init__(self, customer_id: int):
        super().__init__("Customer not found")
        self.customer_id = customer_id

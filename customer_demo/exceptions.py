class CustomerError(Exception):
    """Base class for customer domain errors"""


class CustomerAlreadyExistsError(CustomerError):
    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer already exists: {customer_id}")

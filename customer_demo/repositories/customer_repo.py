import logging
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
from customer_demo.exceptions import CustomerAlreadyExistsError
from customer_demo.models.customer import Customer, utcnow

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("username", "email", "phone_number", "post_code")


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        id: str,
        username: str,
        email: str,
        phone_number: str,
        post_code: str,
    ) -> Customer:
        """Create a new customer, raising CustomerAlreadyExistsError on a taken id"""
        if self.get_by_id(id) is not None:
            raise CustomerAlreadyExistsError(id)

        now = utcnow()
        customer = Customer(
            id=id,
            username=username,
            email=email,
            phone_number=phone_number,
            post_code=post_code,
            created_at=now,
            updated_at=now,
        )
        self.db.add(customer)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent create for the same id
            self.db.rollback()
            raise CustomerAlreadyExistsError(id)
        self.db.refresh(customer)
        logger.info(f"Created customer {id}")
        return customer

    def get_by_id(self, customer_id: str) -> Optional[Customer]:
        """Get customer by ID"""
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def get_all(self) -> List[Customer]:
        """Get all customers ordered by ID"""
        return self.db.query(Customer).order_by(Customer.id).all()

    def update(self, customer_id: str, **kwargs) -> Optional[Customer]:
        """Overwrite the mutable fields and refresh updated_at"""
        customer = self.get_by_id(customer_id)
        if not customer:
            return None

        for key, value in kwargs.items():
            if key in MUTABLE_FIELDS:
                setattr(customer, key, value)

        now = utcnow()
        previous = customer.updated_at
        if previous is not None and previous.tzinfo is None:
            previous = previous.replace(tzinfo=now.tzinfo)
        customer.updated_at = max(now, previous) if previous else now
        try:
            self.db.commit()
        except StaleDataError:
            # Deleted by another request after the lookup
            self.db.rollback()
            logger.info(f"Customer {customer_id} vanished before update")
            return None
        self.db.refresh(customer)
        logger.info(f"Updated customer {customer_id}")
        return customer

    def delete(self, customer_id: str) -> bool:
        """Delete customer"""
        customer = self.get_by_id(customer_id)
        if not customer:
            return False

        self.db.delete(customer)
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            logger.info(f"Customer {customer_id} vanished before delete")
            return False
        logger.info(f"Deleted customer {customer_id}")
        return True

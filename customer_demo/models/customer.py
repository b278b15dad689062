from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime
from customer_demo.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    __tablename__ = "customer"

    # Caller-assigned, immutable
    id = Column(String(10), primary_key=True)

    # Contact info
    username = Column(String(50), nullable=False)
    email = Column(String(50), nullable=False)
    phone_number = Column(String(11), nullable=False)
    post_code = Column(String(7), nullable=False)

    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Customer id={self.id!r} username={self.username!r}>"

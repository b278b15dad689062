from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
from customer_demo.database import get_db
from customer_demo.exceptions import CustomerAlreadyExistsError
from customer_demo.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse, ErrorResponse
from customer_demo.repositories.customer_repo import CustomerRepository

router = APIRouter(prefix="/api/customers", tags=["Customers"])


def _not_found(customer_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Customer not found: {customer_id}"
    )


@router.get("", response_model=List[CustomerResponse])
def list_customers(db: Session = Depends(get_db)):
    """List all customers"""
    customer_repo = CustomerRepository(db)
    return customer_repo.get_all()


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_customer(customer_id: str, db: Session = Depends(get_db)):
    """Get customer by ID"""
    customer_repo = CustomerRepository(db)
    customer = customer_repo.get_by_id(customer_id)

    if not customer:
        raise _not_found(customer_id)

    return customer


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def create_customer(customer_data: CustomerCreate, db: Session = Depends(get_db)):
    """Create a new customer"""
    customer_repo = CustomerRepository(db)
    try:
        customer = customer_repo.create(
            id=customer_data.id,
            username=customer_data.username,
            email=customer_data.email,
            phone_number=customer_data.phone_number,
            post_code=customer_data.post_code,
        )
    except CustomerAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    return customer


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_customer(
    customer_id: str,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db)
):
    """Update customer (every mutable field is replaced)"""
    customer_repo = CustomerRepository(db)
    customer = customer_repo.update(customer_id, **customer_data.model_dump())

    if not customer:
        raise _not_found(customer_id)

    return customer


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
def delete_customer(customer_id: str, db: Session = Depends(get_db)):
    """Delete customer"""
    customer_repo = CustomerRepository(db)
    success = customer_repo.delete(customer_id)

    if not success:
        raise _not_found(customer_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)

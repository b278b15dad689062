"""
Console view state.

`ConsoleState` is never mutated in place: every transition function takes the
current state and returns a new one, so the page handlers read as a sequence
of named steps.
"""

import enum
from pydantic import BaseModel
from typing import Optional


class Mode(str, enum.Enum):
    BROWSING = "browsing"
    CREATING = "creating"
    EDITING = "editing"


class CustomerForm(BaseModel):
    id: str = ""
    username: str = ""
    email: str = ""
    phone_number: str = ""
    post_code: str = ""

    @classmethod
    def from_customer(cls, customer: dict) -> "CustomerForm":
        """Pre-fill from a Customer as returned by the API (camelCase keys)"""
        return cls(
            id=customer.get("id", ""),
            username=customer.get("username", ""),
            email=customer.get("email", ""),
            phone_number=customer.get("phoneNumber", ""),
            post_code=customer.get("postCode", ""),
        )

    def to_update_payload(self) -> dict:
        return {
            "username": self.username,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "postCode": self.post_code,
        }

    def to_create_payload(self) -> dict:
        return {"id": self.id, **self.to_update_payload()}


class ConsoleState(BaseModel):
    mode: Mode = Mode.BROWSING
    editing_id: Optional[str] = None
    form: CustomerForm = CustomerForm()
    customers: list[dict] = []
    error: Optional[str] = None
    notice: Optional[str] = None
    loading: bool = False

    @property
    def form_open(self) -> bool:
        return self.mode != Mode.BROWSING

    @property
    def id_editable(self) -> bool:
        return self.mode == Mode.CREATING


def initial_state(notice: Optional[str] = None) -> ConsoleState:
    return ConsoleState(notice=notice)


def _update(state: ConsoleState, **changes) -> ConsoleState:
    return state.model_copy(update=changes)


# List fetch

def begin_fetch(state: ConsoleState) -> ConsoleState:
    return _update(state, loading=True)


def fetch_succeeded(state: ConsoleState, customers: list[dict]) -> ConsoleState:
    return _update(state, customers=list(customers), error=None, loading=False)


def fetch_failed(state: ConsoleState, message: str) -> ConsoleState:
    # Prior list is kept so the table stays usable
    return _update(state, error=message, loading=False)


# Form mode

def start_create(state: ConsoleState, form: Optional[CustomerForm] = None) -> ConsoleState:
    return _update(
        state,
        mode=Mode.CREATING,
        editing_id=None,
        form=form or CustomerForm(),
    )


def start_edit(state: ConsoleState, customer: dict, form: Optional[CustomerForm] = None) -> ConsoleState:
    """Enter Editing for `customer`; `form` carries user input being re-shown"""
    customer_id = customer["id"]
    form = form or CustomerForm.from_customer(customer)
    return _update(
        state,
        mode=Mode.EDITING,
        editing_id=customer_id,
        form=form.model_copy(update={"id": customer_id}),
    )


def cancel(state: ConsoleState) -> ConsoleState:
    return _update(state, mode=Mode.BROWSING, editing_id=None, form=CustomerForm())


# Submissions

def submit_succeeded(state: ConsoleState, notice: Optional[str] = None) -> ConsoleState:
    return _update(cancel(state), error=None, notice=notice)


def submit_failed(state: ConsoleState, message: str) -> ConsoleState:
    # Form stays open with the user's input for correction
    return _update(state, error=message, notice=None)


def delete_failed(state: ConsoleState, message: str) -> ConsoleState:
    return _update(state, error=message, notice=None)

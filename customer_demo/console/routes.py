import os
import logging
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from typing import Optional
from customer_demo.config import settings
from customer_demo.console.client import ApiError, CustomerApiClient, CUSTOMERS_PATH, get_api_client
from customer_demo.console.state import (
    ConsoleState,
    CustomerForm,
    Mode,
    begin_fetch,
    delete_failed,
    fetch_failed,
    fetch_succeeded,
    initial_state,
    start_create,
    start_edit,
    submit_failed,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/console", tags=["Console"], include_in_schema=False)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
templates = Jinja2Templates(directory=TEMPLATE_DIR)

NOTICES = {
    "created": "Customer created",
    "updated": "Customer updated",
    "deleted": "Customer deleted",
}


def _refresh(state: ConsoleState, client: CustomerApiClient) -> ConsoleState:
    """Re-fetch the full list; on failure the previous list stays on screen"""
    state = begin_fetch(state)
    try:
        return fetch_succeeded(state, client.list_customers())
    except ApiError as e:
        return fetch_failed(state, e.message)


def _render(request: Request, state: ConsoleState, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "console.html",
        {
            "state": state,
            "Mode": Mode,
            "api_endpoint": settings.API_BASE_URL.rstrip("/") + CUSTOMERS_PATH,
        },
        status_code=status_code,
    )


def _failure_status(error: ApiError) -> int:
    # No status means the service itself could not be reached
    return error.status_code or 502


def _back_to_list(notice: str) -> RedirectResponse:
    return RedirectResponse(url=f"/console?notice={notice}", status_code=303)


@router.get("")
def console_page(
    request: Request,
    notice: Optional[str] = None,
    client: CustomerApiClient = Depends(get_api_client),
):
    """Record table (Browsing); `notice` is set by the redirect after a mutation"""
    state = _refresh(initial_state(NOTICES.get(notice)), client)
    return _render(request, state)


@router.get("/new")
def new_customer_page(request: Request, client: CustomerApiClient = Depends(get_api_client)):
    """Empty form with an editable ID (Creating)"""
    state = start_create(_refresh(initial_state(), client))
    return _render(request, state)


@router.post("/new")
def submit_new_customer(
    request: Request,
    id: str = Form(""),
    username: str = Form(""),
    email: str = Form(""),
    phone_number: str = Form(""),
    post_code: str = Form(""),
    client: CustomerApiClient = Depends(get_api_client),
):
    form = CustomerForm(
        id=id,
        username=username,
        email=email,
        phone_number=phone_number,
        post_code=post_code,
    )
    try:
        client.create_customer(form.to_create_payload())
    except ApiError as e:
        state = start_create(_refresh(initial_state(), client), form)
        return _render(request, submit_failed(state, e.message), status_code=_failure_status(e))

    logger.info(f"Console created customer {form.id}")
    return _back_to_list("created")


@router.get("/{customer_id}/edit")
def edit_customer_page(
    request: Request,
    customer_id: str,
    client: CustomerApiClient = Depends(get_api_client),
):
    """Form pre-filled from the record, ID fixed (Editing)"""
    state = _refresh(initial_state(), client)
    customer = next((c for c in state.customers if c.get("id") == customer_id), None)
    if customer is None:
        try:
            customer = client.get_customer(customer_id)
        except ApiError as e:
            return _render(request, fetch_failed(state, e.message))

    return _render(request, start_edit(state, customer))


@router.post("/{customer_id}/edit")
def submit_customer_edit(
    request: Request,
    customer_id: str,
    username: str = Form(""),
    email: str = Form(""),
    phone_number: str = Form(""),
    post_code: str = Form(""),
    client: CustomerApiClient = Depends(get_api_client),
):
    form = CustomerForm(
        id=customer_id,
        username=username,
        email=email,
        phone_number=phone_number,
        post_code=post_code,
    )
    try:
        client.update_customer(customer_id, form.to_update_payload())
    except ApiError as e:
        state = start_edit(_refresh(initial_state(), client), {"id": customer_id}, form)
        return _render(request, submit_failed(state, e.message), status_code=_failure_status(e))

    logger.info(f"Console updated customer {customer_id}")
    return _back_to_list("updated")


@router.post("/{customer_id}/delete")
def delete_customer_action(
    request: Request,
    customer_id: str,
    client: CustomerApiClient = Depends(get_api_client),
):
    try:
        client.delete_customer(customer_id)
    except ApiError as e:
        state = _refresh(initial_state(), client)
        return _render(request, delete_failed(state, e.message), status_code=_failure_status(e))

    logger.info(f"Console deleted customer {customer_id}")
    return _back_to_list("deleted")

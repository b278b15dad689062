from customer_demo.console.state import (
    CustomerForm,
    Mode,
    begin_fetch,
    cancel,
    delete_failed,
    fetch_failed,
    fetch_succeeded,
    initial_state,
    start_create,
    start_edit,
    submit_failed,
    submit_succeeded,
)

TARO = {
    "id": "C001",
    "username": "Taro",
    "email": "taro@example.com",
    "phoneNumber": "09012345678",
    "postCode": "1234567",
    "createdAt": "2026-01-01T00:00:00+00:00",
    "updatedAt": "2026-01-01T00:00:00+00:00",
}


class TestFetchTransitions:
    def test_initial_state_is_browsing(self):
        state = initial_state()
        assert state.mode == Mode.BROWSING
        assert state.editing_id is None
        assert not state.form_open
        assert state.customers == []

    def test_successful_fetch_replaces_list_and_clears_error(self):
        state = fetch_failed(begin_fetch(initial_state()), "offline")
        state = begin_fetch(state)
        assert state.loading

        state = fetch_succeeded(state, [TARO])
        assert state.customers == [TARO]
        assert state.error is None
        assert not state.loading

    def test_failed_fetch_keeps_prior_list(self):
        state = fetch_succeeded(initial_state(), [TARO])
        state = fetch_failed(begin_fetch(state), "offline")
        assert state.customers == [TARO]
        assert state.error == "offline"
        assert not state.loading

    def test_transitions_do_not_mutate_input(self):
        state = initial_state()
        begin_fetch(state)
        start_create(state)
        assert not state.loading
        assert state.mode == Mode.BROWSING


class TestFormTransitions:
    def test_start_create_clears_form_and_allows_id(self):
        state = start_create(initial_state())
        assert state.mode == Mode.CREATING
        assert state.id_editable
        assert state.form == CustomerForm()

    def test_start_edit_prefills_and_fixes_id(self):
        state = start_edit(initial_state(), TARO)
        assert state.mode == Mode.EDITING
        assert state.editing_id == "C001"
        assert not state.id_editable
        assert state.form.phone_number == "09012345678"
        assert state.form.post_code == "1234567"

    def test_start_edit_keeps_user_input_but_not_its_id(self):
        typed = CustomerForm(id="ZZZ", username="Typed")
        state = start_edit(initial_state(), {"id": "C001"}, typed)
        assert state.form.username == "Typed"
        assert state.form.id == "C001"

    def test_cancel_discards_form(self):
        state = cancel(start_edit(initial_state(), TARO))
        assert state.mode == Mode.BROWSING
        assert state.editing_id is None
        assert state.form == CustomerForm()

    def test_submit_failed_keeps_form_open(self):
        form = CustomerForm(id="C001", username="Taro", phone_number="12")
        state = submit_failed(start_create(initial_state(), form), "phoneNumber: must be 10 or 11 digits")
        assert state.mode == Mode.CREATING
        assert state.form == form
        assert state.error == "phoneNumber: must be 10 or 11 digits"

    def test_submit_succeeded_returns_to_browsing(self):
        state = submit_succeeded(start_edit(initial_state(), TARO), notice="Customer updated")
        assert state.mode == Mode.BROWSING
        assert state.notice == "Customer updated"
        assert state.error is None

    def test_delete_failed_sets_error_and_clears_notice(self):
        state = delete_failed(initial_state("Customer created"), "Customer not found: C001")
        assert state.error == "Customer not found: C001"
        assert state.notice is None


class TestCustomerForm:
    def test_payloads_use_api_field_names(self):
        form = CustomerForm.from_customer(TARO)
        assert form.to_create_payload() == {
            "id": "C001",
            "username": "Taro",
            "email": "taro@example.com",
            "phoneNumber": "09012345678",
            "postCode": "1234567",
        }
        assert "id" not in form.to_update_payload()

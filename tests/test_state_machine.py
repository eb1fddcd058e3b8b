import pytest

from brokerconnect.domain.bookings.state_machine import (
    ACTIVE_STATES,
    TERMINAL_STATES,
    BookingAction,
    BookingStatus,
    Party,
    action_for_status,
    allowed_actions,
    next_status,
)
from brokerconnect.errors import Forbidden, InvalidTransition, ValidationFailure


class TestNextStatus:
    @pytest.mark.parametrize("current", [s.value for s in ACTIVE_STATES])
    def test_broker_can_confirm_any_active_booking(self, current):
        assert next_status(current, BookingAction.CONFIRM, Party.BROKER) == BookingStatus.CONFIRMED

    def test_confirming_a_confirmed_booking_keeps_it_confirmed(self):
        assert next_status("confirmed", BookingAction.CONFIRM, Party.BROKER) == BookingStatus.CONFIRMED

    @pytest.mark.parametrize("current", [s.value for s in ACTIVE_STATES])
    def test_cancel_and_complete_from_any_active_state(self, current):
        assert next_status(current, BookingAction.CANCEL, Party.BROKER) == BookingStatus.CANCELLED
        assert next_status(current, BookingAction.COMPLETE, Party.BROKER) == BookingStatus.COMPLETED

    @pytest.mark.parametrize("current", [s.value for s in TERMINAL_STATES])
    @pytest.mark.parametrize("action", [a for a in BookingAction if a not in (BookingAction.ACCEPT_RESCHEDULE, BookingAction.COUNTER_PROPOSE)])
    def test_terminal_states_admit_no_broker_action(self, current, action):
        with pytest.raises(InvalidTransition):
            next_status(current, action, Party.BROKER)

    def test_client_answers_a_reschedule(self):
        assert (
            next_status("reschedule_pending", BookingAction.ACCEPT_RESCHEDULE, Party.CLIENT)
            == BookingStatus.CONFIRMED
        )
        assert (
            next_status("reschedule_pending", BookingAction.COUNTER_PROPOSE, Party.CLIENT)
            == BookingStatus.COUNTER_PENDING
        )

    @pytest.mark.parametrize("current", ["pending", "confirmed", "counter_pending", "cancelled"])
    def test_client_cannot_answer_without_a_proposal(self, current):
        with pytest.raises(InvalidTransition):
            next_status(current, BookingAction.ACCEPT_RESCHEDULE, Party.CLIENT)

    def test_wrong_party_is_forbidden_before_state_is_checked(self):
        with pytest.raises(Forbidden):
            next_status("pending", BookingAction.CONFIRM, Party.CLIENT)
        with pytest.raises(Forbidden):
            next_status("completed", BookingAction.COUNTER_PROPOSE, Party.BROKER)

    def test_unknown_stored_status(self):
        with pytest.raises(InvalidTransition):
            next_status("archived", BookingAction.CANCEL, Party.BROKER)


class TestStatusEndpointMapping:
    def test_allowed_values(self):
        assert action_for_status("confirmed") == BookingAction.CONFIRM
        assert action_for_status("cancelled") == BookingAction.CANCEL
        assert action_for_status("completed") == BookingAction.COMPLETE

    @pytest.mark.parametrize("status", ["pending", "reschedule_pending", "counter_pending", "bogus", ""])
    def test_other_values_are_validation_failures(self, status):
        with pytest.raises(ValidationFailure):
            action_for_status(status)


def test_allowed_actions_per_party():
    assert set(allowed_actions("reschedule_pending", Party.CLIENT)) == {
        BookingAction.ACCEPT_RESCHEDULE,
        BookingAction.COUNTER_PROPOSE,
    }
    assert BookingAction.CONFIRM in allowed_actions("confirmed", Party.BROKER)
    assert allowed_actions("completed", Party.BROKER) == []
    assert allowed_actions("pending", Party.CLIENT) == []

"""
Booking lifecycle

    pending ──confirm──────────────▶ confirmed
       │                                 │
       ├──propose_reschedule──▶ reschedule_pending ──accept──▶ confirmed
       │                                 │
       │                                 └──counter──▶ counter_pending ──confirm──▶ confirmed
       │
       └──cancel / complete (from any active state) ──▶ cancelled / completed

Brokers confirm, cancel, complete and propose reschedules from any active
state. Clients only answer a pending reschedule proposal. cancelled and
completed are terminal.
"""

from dataclasses import dataclass
from enum import Enum

from ...errors import Forbidden, InvalidTransition, ValidationFailure


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    RESCHEDULE_PENDING = "reschedule_pending"
    COUNTER_PENDING = "counter_pending"


class BookingAction(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    COMPLETE = "complete"
    PROPOSE_RESCHEDULE = "propose_reschedule"
    ACCEPT_RESCHEDULE = "accept_reschedule"
    COUNTER_PROPOSE = "counter_propose"


class Party(str, Enum):
    CLIENT = "client"
    BROKER = "broker"


TERMINAL_STATES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})
ACTIVE_STATES = frozenset(BookingStatus) - TERMINAL_STATES


@dataclass(frozen=True)
class Transition:
    action: BookingAction
    actor: Party
    sources: frozenset
    target: BookingStatus


TRANSITIONS: dict[BookingAction, Transition] = {
    BookingAction.CONFIRM: Transition(
        BookingAction.CONFIRM, Party.BROKER, ACTIVE_STATES, BookingStatus.CONFIRMED
    ),
    BookingAction.CANCEL: Transition(
        BookingAction.CANCEL, Party.BROKER, ACTIVE_STATES, BookingStatus.CANCELLED
    ),
    BookingAction.COMPLETE: Transition(
        BookingAction.COMPLETE, Party.BROKER, ACTIVE_STATES, BookingStatus.COMPLETED
    ),
    BookingAction.PROPOSE_RESCHEDULE: Transition(
        BookingAction.PROPOSE_RESCHEDULE,
        Party.BROKER,
        ACTIVE_STATES,
        BookingStatus.RESCHEDULE_PENDING,
    ),
    BookingAction.ACCEPT_RESCHEDULE: Transition(
        BookingAction.ACCEPT_RESCHEDULE,
        Party.CLIENT,
        frozenset({BookingStatus.RESCHEDULE_PENDING}),
        BookingStatus.CONFIRMED,
    ),
    BookingAction.COUNTER_PROPOSE: Transition(
        BookingAction.COUNTER_PROPOSE,
        Party.CLIENT,
        frozenset({BookingStatus.RESCHEDULE_PENDING}),
        BookingStatus.COUNTER_PENDING,
    ),
}

# Values accepted by the broker status endpoint
STATUS_ACTIONS: dict[str, BookingAction] = {
    BookingStatus.CONFIRMED.value: BookingAction.CONFIRM,
    BookingStatus.CANCELLED.value: BookingAction.CANCEL,
    BookingStatus.COMPLETED.value: BookingAction.COMPLETE,
}


def action_for_status(status: str) -> BookingAction:
    """Map a requested status (status endpoint) onto its action"""
    try:
        return STATUS_ACTIONS[status]
    except KeyError:
        allowed = ", ".join(STATUS_ACTIONS)
        raise ValidationFailure(f"Invalid status '{status}'. Allowed values: {allowed}") from None


def next_status(current: str, action: BookingAction, actor: Party) -> BookingStatus:
    """
    Resolve a transition.

    Raises:
        Forbidden: the action belongs to the other party
        InvalidTransition: the action is not allowed from ``current``
    """
    transition = TRANSITIONS[action]
    if actor != transition.actor:
        raise Forbidden(f"Only the {transition.actor.value} can {action.value.replace('_', ' ')} this booking")

    try:
        status = BookingStatus(current)
    except ValueError:
        raise InvalidTransition(f"Booking has unknown status '{current}'") from None

    if status not in transition.sources:
        raise InvalidTransition(
            f"Cannot {action.value.replace('_', ' ')} a booking that is {status.value}"
        )
    return transition.target


def allowed_actions(current: str, actor: Party) -> list[BookingAction]:
    """Actions ``actor`` may take on a booking in ``current`` status"""
    return [
        t.action for t in TRANSITIONS.values() if t.actor == actor and current in {s.value for s in t.sources}
    ]

from __future__ import annotations

from typing import Iterable, Optional

from ..core.enums import DayState, EventType
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOutToday,
    AlreadyOnBreak,
    BreakStillOpen,
    NotCheckedIn,
    NotOnBreak,
    OutOfOrderEvent,
)
from .model import AttendanceEvent

_TRANSITIONS: dict[tuple[DayState, EventType], DayState] = {
    (DayState.NOT_CHECKED_IN, EventType.CHECK_IN): DayState.CHECKED_IN,
    (DayState.CHECKED_IN, EventType.BREAK_IN): DayState.ON_BREAK,
    (DayState.ON_BREAK, EventType.BREAK_OUT): DayState.CHECKED_IN,
    (DayState.CHECKED_IN, EventType.CHECK_OUT): DayState.CHECKED_OUT,
}

_ACTION_LABELS = {
    EventType.CHECK_IN: "check-in",
    EventType.BREAK_IN: "break-in",
    EventType.BREAK_OUT: "break-out",
    EventType.CHECK_OUT: "check-out",
}


class AttendanceStateMachine:
    """Per-(employee, date) state machine.

    Pure: it never touches storage. The service feeds it the day's events and
    appends whatever it accepts.
    """

    def allowed_actions(self, state: DayState) -> tuple[EventType, ...]:
        return tuple(event for (current, event) in _TRANSITIONS if current == state)

    def apply(self, state: DayState, event_type: EventType) -> DayState:
        nxt = _TRANSITIONS.get((state, event_type))
        if nxt is not None:
            return nxt
        raise self._refusal(state, event_type)

    def replay(self, events: Iterable[AttendanceEvent]) -> DayState:
        state = DayState.NOT_CHECKED_IN
        for event in sorted(events, key=lambda e: e.timestamp):
            state = self.apply(state, event.event_type)
        return state

    def check_order(self, events: Iterable[AttendanceEvent], candidate: AttendanceEvent, state: DayState) -> None:
        last: Optional[AttendanceEvent] = None
        for event in events:
            if last is None or event.timestamp > last.timestamp:
                last = event
        if last is not None and candidate.timestamp < last.timestamp:
            raise OutOfOrderEvent(
                f"cannot {_ACTION_LABELS[candidate.event_type]}: "
                f"timestamp {candidate.timestamp.isoformat()} is before the last recorded "
                f"{_ACTION_LABELS[last.event_type]} at {last.timestamp.isoformat()}",
                allowed_actions=self.allowed_actions(state),
            )

    def _refusal(self, state: DayState, event_type: EventType):
        allowed = self.allowed_actions(state)
        action = _ACTION_LABELS[event_type]

        if state == DayState.CHECKED_OUT:
            return AlreadyCheckedOutToday(
                f"cannot {action}: already checked out today", allowed_actions=allowed
            )

        if event_type == EventType.CHECK_IN:
            return AlreadyCheckedIn(f"cannot {action}: already checked in today", allowed_actions=allowed)

        if event_type == EventType.BREAK_IN:
            if state == DayState.ON_BREAK:
                return AlreadyOnBreak(f"cannot {action}: already on break, break-out first", allowed_actions=allowed)
            return NotCheckedIn(f"cannot {action}: not checked in today, check-in first", allowed_actions=allowed)

        if event_type == EventType.BREAK_OUT:
            return NotOnBreak(f"cannot {action}: no open break, break-in first", allowed_actions=allowed)

        # CHECK_OUT
        if state == DayState.ON_BREAK:
            return BreakStillOpen(f"cannot {action}: break is still open, break-out first", allowed_actions=allowed)
        return NotCheckedIn(f"cannot {action}: not checked in today, check-in first", allowed_actions=allowed)

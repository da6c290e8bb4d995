"""Positional activation of rules.

Each rule has an :class:`ActivationState`: whether it starts active and the
sorted byte offsets at which it flips.  Directive scanning first collects
:class:`LedgerEvent` values, then :meth:`ActivationLedger.from_events`
sorts them by position and folds them into minimal transition lists, so
the result does not depend on the order the events were discovered in.
"""

from __future__ import annotations

import bisect
import enum
import logging
from dataclasses import dataclass
from typing import Iterable

from lint_engine.rules import RuleKind

logger = logging.getLogger(__name__)


class Direction(str, enum.Enum):
    """Which way a directive switches a rule."""

    DISABLE = "disable"
    ENABLE = "enable"


@dataclass(frozen=True, slots=True)
class LedgerEvent:
    """A directive's request to switch *rule* at byte *position*."""

    position: int
    rule: RuleKind
    direction: Direction


class ActivationState:
    """On/off timeline of one rule over the byte offsets of a document.

    ``transitions`` only ever holds real flips: recording a disable while the
    rule is already off (or an enable while on) changes nothing.
    """

    __slots__ = ("initial_active", "_transitions")

    def __init__(self, initial_active: bool = True) -> None:
        self.initial_active = initial_active
        self._transitions: list[int] = []

    def __repr__(self) -> str:
        return f"ActivationState(initial_active={self.initial_active}, transitions={self._transitions})"

    @property
    def transitions(self) -> tuple[int, ...]:
        return tuple(self._transitions)

    @property
    def current_active(self) -> bool:
        """State after every transition recorded so far."""
        return self.initial_active ^ (len(self._transitions) % 2 == 1)

    def is_active(self, position: int) -> bool:
        """Return whether the rule is active at byte *position*.

        Only transitions strictly before *position* count.
        """
        flips = bisect.bisect_left(self._transitions, position)
        return self.initial_active ^ (flips % 2 == 1)

    def record_disable(self, position: int) -> None:
        if self.current_active:
            self._append(position)

    def record_enable(self, position: int) -> None:
        if not self.current_active:
            self._append(position)

    def _append(self, position: int) -> None:
        if self._transitions and position < self._transitions[-1]:
            raise ValueError(
                f"Transition at byte {position} precedes the last recorded "
                f"transition at byte {self._transitions[-1]}"
            )
        self._transitions.append(position)


class ActivationLedger:
    """Per-rule :class:`ActivationState` lookup.

    Rules never mentioned by a directive or the configuration are active
    everywhere.
    """

    def __init__(self, disabled: Iterable[RuleKind] = ()) -> None:
        self._states: dict[RuleKind, ActivationState] = {}
        self._locked: frozenset[RuleKind] = frozenset(disabled)
        for rule in self._locked:
            self._states[rule] = ActivationState(initial_active=False)

    @classmethod
    def from_events(
        cls,
        events: Iterable[LedgerEvent],
        disabled: Iterable[RuleKind] = (),
    ) -> ActivationLedger:
        """Build a ledger from directive events in any order.

        Events are stably sorted by position, so directives at the same
        offset apply in discovery order.  Rules in *disabled* start inactive
        and ignore every directive.
        """
        ledger = cls(disabled)
        for event in sorted(events, key=lambda e: e.position):
            if event.direction is Direction.DISABLE:
                ledger.record_disable(event.rule, event.position)
            else:
                ledger.record_enable(event.rule, event.position)
        return ledger

    def state(self, rule: RuleKind) -> ActivationState:
        state = self._states.get(rule)
        if state is None:
            state = self._states[rule] = ActivationState()
        return state

    def is_active(self, rule: RuleKind, position: int) -> bool:
        state = self._states.get(rule)
        return True if state is None else state.is_active(position)

    def is_disabled_by_config(self, rule: RuleKind) -> bool:
        return rule in self._locked

    def record_disable(self, rule: RuleKind, position: int) -> None:
        if rule in self._locked:
            logger.debug("Ignoring NOLINT(%s) at byte %d: disabled by configuration", rule.value, position)
            return
        self.state(rule).record_disable(position)

    def record_enable(self, rule: RuleKind, position: int) -> None:
        if rule in self._locked:
            logger.debug("Ignoring LINT(%s) at byte %d: disabled by configuration", rule.value, position)
            return
        self.state(rule).record_enable(position)

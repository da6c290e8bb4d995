"""Unit tests for rule activation states and the activation ledger."""

from __future__ import annotations

import pytest

from lint_engine.ledger import ActivationLedger, ActivationState, Direction, LedgerEvent
from lint_engine.rules import RuleKind


def _event(position: int, rule: RuleKind, direction: Direction = Direction.DISABLE) -> LedgerEvent:
    return LedgerEvent(position=position, rule=rule, direction=direction)


# ---------------------------------------------------------------------------
# ActivationState
# ---------------------------------------------------------------------------


class TestActivationState:
    def test_default_is_active_everywhere(self) -> None:
        state = ActivationState()
        assert state.is_active(0)
        assert state.is_active(10_000)
        assert state.transitions == ()

    @pytest.mark.parametrize("initial", [True, False])
    def test_initial_value_holds_before_first_transition(self, initial: bool) -> None:
        state = ActivationState(initial_active=initial)
        if initial:
            state.record_disable(10)
            state.record_enable(20)
        else:
            state.record_enable(10)
            state.record_disable(20)
        assert state.is_active(0) is initial
        assert state.is_active(10) is initial
        assert state.is_active(11) is not initial
        assert state.is_active(21) is initial

    def test_consecutive_disables_record_one_transition(self) -> None:
        state = ActivationState()
        state.record_disable(5)
        state.record_disable(9)
        assert state.transitions == (5,)
        assert not state.current_active

    def test_enable_after_disable_restores_initial_state(self) -> None:
        state = ActivationState()
        state.record_disable(5)
        state.record_enable(9)
        assert state.transitions == (5, 9)
        assert state.current_active
        assert state.is_active(100)

    def test_enable_while_active_is_ignored(self) -> None:
        state = ActivationState()
        state.record_enable(3)
        assert state.transitions == ()

    def test_transition_only_counts_strictly_before_position(self) -> None:
        state = ActivationState()
        state.record_disable(7)
        assert state.is_active(7)
        assert not state.is_active(8)

    def test_out_of_order_transition_raises(self) -> None:
        state = ActivationState()
        state.record_disable(10)
        with pytest.raises(ValueError, match="precedes"):
            state.record_enable(4)


# ---------------------------------------------------------------------------
# ActivationLedger
# ---------------------------------------------------------------------------


class TestActivationLedger:
    def test_unknown_rule_is_active(self) -> None:
        ledger = ActivationLedger()
        assert ledger.is_active(RuleKind.ALIAS, 0)

    def test_from_events_sorts_by_position(self) -> None:
        events = [
            _event(20, RuleKind.ALIAS, Direction.ENABLE),
            _event(10, RuleKind.ALIAS, Direction.DISABLE),
        ]
        ledger = ActivationLedger.from_events(events)
        assert ledger.state(RuleKind.ALIAS).transitions == (10, 20)
        assert not ledger.is_active(RuleKind.ALIAS, 15)
        assert ledger.is_active(RuleKind.ALIAS, 25)

    def test_rules_are_independent(self) -> None:
        ledger = ActivationLedger.from_events([_event(3, RuleKind.ALIAS)])
        assert not ledger.is_active(RuleKind.ALIAS, 4)
        assert ledger.is_active(RuleKind.JOIN, 4)

    def test_same_position_applies_in_discovery_order(self) -> None:
        events = [
            _event(5, RuleKind.ALIAS, Direction.DISABLE),
            _event(5, RuleKind.ALIAS, Direction.ENABLE),
        ]
        ledger = ActivationLedger.from_events(events)
        assert ledger.state(RuleKind.ALIAS).transitions == (5, 5)
        assert ledger.is_active(RuleKind.ALIAS, 6)

    def test_config_disabled_rule_ignores_directives(self) -> None:
        events = [_event(5, RuleKind.ALIAS, Direction.ENABLE)]
        ledger = ActivationLedger.from_events(events, disabled=[RuleKind.ALIAS])
        assert ledger.is_disabled_by_config(RuleKind.ALIAS)
        assert not ledger.is_active(RuleKind.ALIAS, 0)
        assert not ledger.is_active(RuleKind.ALIAS, 100)
        assert ledger.state(RuleKind.ALIAS).transitions == ()

    def test_state_is_created_on_demand(self) -> None:
        ledger = ActivationLedger()
        state = ledger.state(RuleKind.JOIN)
        assert state.initial_active
        assert ledger.state(RuleKind.JOIN) is state

"""Check registry holding an ordered suite of check implementations.

Checks run in registration order and are looked up by :class:`RuleKind`.
"""

from __future__ import annotations

import logging

from lint_engine.checks.base import BaseCheck
from lint_engine.rules import RuleKind

logger = logging.getLogger(__name__)


class CheckRegistry:
    """Ordered registry of check implementations.

    Maintains a mapping of :class:`RuleKind` to :class:`BaseCheck`
    instances in registration order.  The :class:`LintEngine` runs the
    checks in that order.
    """

    def __init__(self, checks: list[BaseCheck] | None = None) -> None:
        self._checks: dict[RuleKind, BaseCheck] = {}
        for check in checks or []:
            self.register(check)

    def register(self, check: BaseCheck) -> None:
        """Append a check implementation to the suite.

        Parameters
        ----------
        check:
            The check instance to register.  Its ``rule`` property
            determines the key under which it is stored.

        Raises
        ------
        ValueError
            If a check for the same rule is already registered, or if a
            check that fills the parse cache is registered after a check
            that needs the syntax tree.
        """
        if check.rule in self._checks:
            raise ValueError(
                f"Check for rule {check.rule.value} is already registered. "
                f"Unregister the existing check first."
            )
        if check.populates_parse_cache:
            late_for = [c.rule.value for c in self._checks.values() if c.requires_ast]
            if late_for:
                raise ValueError(
                    f"Check {check.rule.value} fills the parse cache and must be "
                    f"registered before {', '.join(late_for)}."
                )
        self._checks[check.rule] = check
        logger.debug("Registered check: %s", check.rule.value)

    def unregister(self, rule: RuleKind) -> None:
        """Remove a check implementation from the registry.

        Raises
        ------
        KeyError
            If no check is registered for *rule*.
        """
        if rule not in self._checks:
            raise KeyError(f"Rule {rule.value} is not registered.")
        del self._checks[rule]
        logger.debug("Unregistered check: %s", rule.value)

    def get(self, rule: RuleKind) -> BaseCheck | None:
        """Look up a check implementation by rule.

        Returns ``None`` if the rule is not registered.
        """
        return self._checks.get(rule)

    def get_all(self) -> list[BaseCheck]:
        """Return all registered checks in registration order."""
        return list(self._checks.values())

    def get_rules(self) -> list[RuleKind]:
        """Return all registered rules in registration order."""
        return list(self._checks)

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, rule: RuleKind) -> bool:
        return rule in self._checks

"""Registered compliance rules, kept in registration order."""

import logging
import threading
from typing import Iterable, Iterator, Optional

from .rule import BaseRule

logger = logging.getLogger(__name__)


class RuleSet:
    """
    Ordered collection of rules keyed by rule id.

    The engine only reads a RuleSet; registration happens at startup (or per
    test, by building a fresh RuleSet).
    """

    def __init__(self, rules: Iterable[BaseRule] = ()):
        self._rules: dict[str, BaseRule] = {}
        self.register(rules)

    def register(self, rules: Iterable[BaseRule]) -> None:
        """
        Append rules in order.

        Raises:
            ValueError: If a rule has no id or its id is already registered.
                Nothing from the batch is registered in that case.
        """
        rules = list(rules)
        seen = set(self._rules)
        for rule in rules:
            rule_id = getattr(rule, "rule_id", None)
            if not rule_id:
                raise ValueError(f"Rule {rule!r} missing rule_id")
            if rule_id in seen:
                raise ValueError(f"Duplicate rule_id registered: {rule_id}")
            seen.add(rule_id)

        for rule in rules:
            self._rules[rule.rule_id] = rule

    def clear(self) -> None:
        self._rules.clear()

    def get_rules(self) -> list[BaseRule]:
        return list(self._rules.values())

    def get(self, rule_id: str) -> BaseRule:
        return self._rules[rule_id]

    def ids(self) -> list[str]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[BaseRule]:
        return iter(list(self._rules.values()))

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules


def build_default_rule_set() -> RuleSet:
    """A RuleSet holding every rule family in evaluation order."""
    from .rules import ALL_RULE_MODULES

    rule_set = RuleSet()
    for module_rules in ALL_RULE_MODULES:
        rule_set.register(module_rules)
    return rule_set


_default_rule_set: Optional[RuleSet] = None
_init_lock = threading.Lock()


def initialize_compliance_rules() -> RuleSet:
    """
    Return the process-wide RuleSet, building it on first use.

    Safe to call from concurrent handlers: the rule families are registered
    exactly once.
    """
    global _default_rule_set
    if _default_rule_set is not None:
        return _default_rule_set

    with _init_lock:
        if _default_rule_set is None:
            _default_rule_set = build_default_rule_set()
            logger.info(f"Registered {len(_default_rule_set)} compliance rules")
    return _default_rule_set


def reset_compliance_rules() -> None:
    """Drop the process-wide RuleSet. Intended for tests."""
    global _default_rule_set
    with _init_lock:
        _default_rule_set = None

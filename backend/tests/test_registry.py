"""Tests for rule registration."""

import threading
from unittest.mock import patch

import pytest

from compliance import registry, service
from compliance.engine import ComplianceEngine
from compliance.registry import (
    RuleSet,
    build_default_rule_set,
    initialize_compliance_rules,
    reset_compliance_rules,
)
from compliance.rule import BaseRule
from compliance.rules import ALL_RULES
from compliance.service import get_rule_count
from compliance.types import RuleCategory


class DummyRule(BaseRule):
    category = RuleCategory.DOCUMENTATION
    description = "Always passes"

    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        self.name = f"Dummy {rule_id}"

    def check(self, context):
        return self.passed()


@pytest.fixture(autouse=True)
def clean_default_rules():
    reset_compliance_rules()
    yield
    reset_compliance_rules()


class TestRuleSet:
    def test_preserves_registration_order(self):
        rule_set = RuleSet([DummyRule("B"), DummyRule("A")])
        rule_set.register([DummyRule("C")])

        assert rule_set.ids() == ["B", "A", "C"]
        assert [r.rule_id for r in rule_set] == ["B", "A", "C"]
        assert len(rule_set) == 3

    def test_duplicate_id_rejected(self):
        rule_set = RuleSet([DummyRule("RULE-001")])

        with pytest.raises(ValueError, match="Duplicate rule_id registered: RULE-001"):
            rule_set.register([DummyRule("RULE-001")])

    def test_duplicate_within_batch_registers_nothing(self):
        rule_set = RuleSet()

        with pytest.raises(ValueError):
            rule_set.register([DummyRule("X"), DummyRule("Y"), DummyRule("X")])

        assert len(rule_set) == 0

    def test_missing_rule_id_rejected(self):
        with pytest.raises(ValueError, match="missing rule_id"):
            RuleSet([DummyRule("")])

    def test_clear(self):
        rule_set = RuleSet([DummyRule("A")])
        rule_set.clear()

        assert rule_set.get_rules() == []
        assert "A" not in rule_set


class TestDefaultRules:
    def test_all_rule_ids_unique(self):
        ids = [rule.rule_id for rule in ALL_RULES]
        assert len(ids) == len(set(ids))

    def test_default_rule_set_order_by_family(self):
        """Documentation, hour limits, time windows, task restrictions, breaks."""
        categories = [rule.category for rule in build_default_rule_set()]
        family_order = [
            RuleCategory.DOCUMENTATION,
            RuleCategory.HOUR_LIMIT,
            RuleCategory.TIME_WINDOW,
            RuleCategory.TASK_RESTRICTION,
            RuleCategory.BREAK,
        ]

        assert sorted(categories, key=family_order.index) == categories
        assert set(categories) == set(family_order)

    def test_expected_rule_catalogue(self):
        rule_set = build_default_rule_set()

        assert len(rule_set) == 27
        assert rule_set.ids()[0] == "RULE-001"
        assert rule_set.ids()[-1] == "RULE-025"

    def test_initialize_returns_same_instance(self):
        first = initialize_compliance_rules()
        second = initialize_compliance_rules()

        assert first is second
        assert get_rule_count() == len(first)

    def test_reset_builds_fresh_rule_set(self):
        first = initialize_compliance_rules()
        reset_compliance_rules()

        assert initialize_compliance_rules() is not first

    def test_concurrent_initialization_registers_once(self):
        results = []
        barrier = threading.Barrier(8)

        def init():
            barrier.wait()
            results.append(initialize_compliance_rules())

        with patch.object(registry, "build_default_rule_set", wraps=build_default_rule_set) as build:
            threads = [threading.Thread(target=init) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert build.call_count == 1
        assert all(r is results[0] for r in results)
        assert len(results[0]) == 27


class TestDefaultEngine:
    @pytest.fixture(autouse=True)
    def clean_default_engine(self):
        service.reset_default_engine()
        yield
        service.reset_default_engine()

    def test_concurrent_first_use_builds_one_engine(self, repository):
        engines = []
        barrier = threading.Barrier(8)

        def get():
            barrier.wait()
            engines.append(service.get_default_engine())

        fake = ComplianceEngine(rule_set=RuleSet(), repository=repository)
        with patch.object(service, "create_default_engine", return_value=fake) as create:
            threads = [threading.Thread(target=get) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert create.call_count == 1
        assert all(engine is fake for engine in engines)

    def test_reset_drops_engine(self, repository):
        first = ComplianceEngine(rule_set=RuleSet(), repository=repository)
        second = ComplianceEngine(rule_set=RuleSet(), repository=repository)

        with patch.object(service, "create_default_engine", side_effect=[first, second]):
            assert service.get_default_engine() is first
            assert service.get_default_engine() is first
            service.reset_default_engine()
            assert service.get_default_engine() is second

"""
Unit tests for attribute condition evaluation.
"""

import pytest
from unittest.mock import patch

from service_permissions.app.rules.conditions import (
    ConditionEvaluator, ConditionOutcome, NonNumericString, build_context, evaluate_condition,
    guard_numeric_strings, is_logic
)
from service_permissions.app.rules.models import Subject, Resource


class TestConditionHelpers:
    """Test cases for the condition shape and numeric string guards."""

    @pytest.mark.parametrize("condition,expected", [
        ({"==": [1, 1]}, True),
        ({"var": "subject.id"}, True),
        ({}, False),
        ({"==": [1, 1], "!=": [1, 2]}, False),
        ("yes", False),
        ([{"==": [1, 1]}], False),
    ])
    def test_is_logic(self, condition, expected):
        assert is_logic(condition) is expected

    @pytest.mark.parametrize("value", ["1_000", "inf", "-inf", "infinity", "NaN"])
    def test_python_only_numbers_are_wrapped(self, value):
        guarded = guard_numeric_strings(value)

        assert isinstance(guarded, NonNumericString)
        assert guarded == value
        with pytest.raises(ValueError):
            float(guarded)
        with pytest.raises(ValueError):
            int(guarded)

    @pytest.mark.parametrize("value", ["1000", " 12.5 ", "1e3", "Infinity", "owner", ""])
    def test_other_strings_untouched(self, value):
        assert type(guard_numeric_strings(value)) is str

    def test_nested_values(self):
        guarded = guard_numeric_strings({"attributes": {"amount": "inf", "tags": ["1_0", "a"]}, "n": 5})

        assert isinstance(guarded["attributes"]["amount"], NonNumericString)
        assert isinstance(guarded["attributes"]["tags"][0], NonNumericString)
        assert guarded["n"] == 5


class TestConditionEvaluator:
    """Test cases for ConditionEvaluator."""

    @pytest.fixture
    def evaluator(self):
        return ConditionEvaluator()

    @pytest.fixture
    def subject(self):
        return Subject(id="u1", roles=["viewer"])

    @pytest.fixture
    def resource(self):
        return Resource(id="d1", type="document", attributes={"ownerId": "u1"})

    def test_build_context_defaults_attributes(self):
        """Test attributes are always present in the context."""
        context = build_context(Subject(id="u1", roles=["a"], attributes=None), Resource(id="r", type="t", attributes=None))

        assert context["subject"] == {"id": "u1", "roles": ["a"], "attributes": {}}
        assert context["resource"] == {"id": "r", "type": "t", "attributes": {}}

    def test_satisfied_condition(self, evaluator, subject, resource):
        """Test a passing owner check."""
        outcome = evaluator.evaluate(
            {"==": [{"var": "resource.attributes.ownerId"}, {"var": "subject.id"}]}, subject, resource
        )

        assert outcome == ConditionOutcome(satisfied=True)
        assert outcome.ok is True

    def test_unsatisfied_condition(self, evaluator, resource):
        """Test a failing owner check is not an error."""
        outcome = evaluator.evaluate(
            {"==": [{"var": "resource.attributes.ownerId"}, {"var": "subject.id"}]},
            Subject(id="u2", roles=[]), resource
        )

        assert outcome.satisfied is False
        assert outcome.ok is True

    def test_unknown_operator_fails_closed(self, evaluator, subject, resource):
        """Test evaluation errors become an unsatisfied outcome."""
        outcome = evaluator.evaluate({"nope": [1, 2]}, subject, resource)

        assert outcome.satisfied is False
        assert outcome.ok is False
        assert outcome.error.code == "CONDITION_EVALUATION_ERROR"

    def test_missing_attribute_comparison_denies(self, evaluator, subject, resource):
        """Test comparisons against missing data are never satisfied."""
        outcome = evaluator.evaluate({">": [{"var": "resource.attributes.level"}, 2]}, subject, resource)

        assert outcome.satisfied is False

    @pytest.mark.parametrize("amount", ["1_000", "inf", "infinity", "INF", "nan"])
    def test_python_only_numeric_strings_do_not_pass_thresholds(self, evaluator, subject, amount):
        """Test attribute strings JavaScript would not parse as numbers stay below thresholds."""
        resource = Resource(id="i1", type="invoice", attributes={"amount": amount})

        outcome = evaluator.evaluate({">": [{"var": "resource.attributes.amount"}, 100]}, subject, resource)

        assert outcome.satisfied is False

    @pytest.mark.parametrize("condition", [{}, {"==": [1, 1], "!=": [1, 2]}, "yes", 1, []])
    def test_malformed_condition_fails_closed(self, evaluator, subject, resource, condition):
        """Test non-operator conditions are rejected."""
        outcome = evaluator.evaluate(condition, subject, resource)

        assert outcome.satisfied is False
        assert outcome.ok is False

    def test_boolean_literal(self, evaluator, subject, resource):
        """Test boolean literals are valid conditions."""
        assert evaluator.evaluate(True, subject, resource).satisfied is True
        assert evaluator.evaluate(False, subject, resource) == ConditionOutcome(satisfied=False)

    def test_unexpected_exception_is_caught(self, subject, resource):
        """Test non-evaluation exceptions are converted as well."""
        with patch("service_permissions.app.rules.conditions.jsonLogic", side_effect=RuntimeError("boom")):
            outcome = ConditionEvaluator().evaluate({"==": [1, 1]}, subject, resource)

        assert outcome.satisfied is False
        assert outcome.error.details["error_type"] == "RuntimeError"

    def test_evaluate_condition_returns_bool(self, subject, resource):
        """Test the boolean wrapper."""
        assert evaluate_condition({"in": ["viewer", {"var": "subject.roles"}]}, subject, resource) is True
        assert evaluate_condition({"bad-op": []}, subject, resource) is False

    def test_evaluate_condition_uses_given_evaluator(self, subject, resource):
        """Test the boolean wrapper delegates to a supplied evaluator."""
        evaluator = ConditionEvaluator()

        with patch.object(evaluator, "evaluate", return_value=ConditionOutcome(satisfied=True)) as mock_evaluate:
            assert evaluate_condition({"bad-op": []}, subject, resource, evaluator=evaluator) is True

        mock_evaluate.assert_called_once_with({"bad-op": []}, subject, resource)

    def test_deterministic(self, evaluator, subject, resource):
        """Test identical inputs give identical results."""
        condition = {"==": [{"var": "resource.attributes.ownerId"}, {"var": "subject.id"}]}

        first = evaluator.evaluate(condition, subject, resource)
        second = evaluator.evaluate(condition, subject, resource)

        assert first == second

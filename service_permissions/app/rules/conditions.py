"""
Attribute condition evaluation.

Conditions are JSON-logic expressions: a mapping with a single operator key
whose value is the operand list, e.g.::

    {"==": [{"var": "resource.attributes.ownerId"}, {"var": "subject.id"}]}

They are evaluated by the ``json_logic`` package against a context built from
the subject and resource of the request. Evaluation never raises past
``ConditionEvaluator.evaluate``; any failure is reported as an unsatisfied
``ConditionOutcome`` carrying the error, and the caller decides what a failed
check means (the resolver treats it as deny).
"""

import re
from dataclasses import dataclass
from typing import Dict, Any, Optional

from json_logic import jsonLogic

from shared.logging import get_logger
from shared.errors import ConditionEvaluationError
from .models import Subject, Resource


# Strings JavaScript's Number() accepts as decimal numbers.
_JS_NUMBER = re.compile(
    r"^\s*[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|Infinity)\s*$"
)


class NonNumericString(str):
    """A string that refuses ``float()``/``int()`` conversion.

    Python parses ``"1_000"``, ``"inf"`` and ``"nan"`` as numbers, JavaScript
    does not. Attribute strings like these are wrapped so that numeric
    comparisons on them fail instead of passing a threshold.
    """

    def __float__(self):
        raise ValueError(f"could not convert string to float: {str(self)!r}")

    def __int__(self):
        raise ValueError(f"invalid literal for int(): {str(self)!r}")


def _python_only_number(value: str) -> bool:
    if _JS_NUMBER.match(value):
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


def guard_numeric_strings(value: Any) -> Any:
    """Copy of ``value`` with Python-only numeric strings wrapped."""
    if isinstance(value, str):
        return NonNumericString(value) if _python_only_number(value) else value
    if isinstance(value, dict):
        return {key: guard_numeric_strings(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [guard_numeric_strings(item) for item in value]
    return value


def is_logic(condition: Any) -> bool:
    """True for a mapping with exactly one string operator key."""
    return isinstance(condition, dict) and len(condition) == 1 and isinstance(next(iter(condition)), str)


def build_context(subject: Subject, resource: Resource) -> Dict[str, Any]:
    """Evaluation context; ``attributes`` is always a mapping."""
    return {
        "subject": {
            "id": subject.id,
            "roles": list(subject.roles),
            "attributes": dict(subject.attributes or {}),
        },
        "resource": {
            "id": resource.id,
            "type": resource.type,
            "attributes": dict(resource.attributes or {}),
        },
    }


@dataclass(frozen=True)
class ConditionOutcome:
    """Result of evaluating a condition: satisfied, or failed with an error."""
    satisfied: bool
    error: Optional[ConditionEvaluationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ConditionEvaluator:
    """Evaluates attribute conditions for a subject/resource pair."""

    def __init__(self):
        self.logger = get_logger("permissions.condition_evaluator")

    def evaluate(self, condition: Any, subject: Subject, resource: Resource) -> ConditionOutcome:
        """Evaluate ``condition``; failures come back as an unsatisfied outcome."""
        if isinstance(condition, bool):
            return ConditionOutcome(satisfied=condition)

        try:
            if not is_logic(condition):
                raise ConditionEvaluationError(
                    "Malformed condition: expected a single-operator mapping",
                    details={"type": type(condition).__name__}
                )
            context = guard_numeric_strings(build_context(subject, resource))
            result = jsonLogic(condition, context)
            return ConditionOutcome(satisfied=bool(result))
        except ConditionEvaluationError as e:
            error = e
        except Exception as e:
            error = ConditionEvaluationError(
                f"Condition evaluation failed: {e}",
                details={"error_type": type(e).__name__}
            )

        self.logger.warning(
            "Condition evaluation failed",
            subject_id=subject.id,
            resource_type=resource.type,
            error=error.message,
            details=error.details
        )
        return ConditionOutcome(satisfied=False, error=error)


def evaluate_condition(condition: Any, subject: Subject, resource: Resource,
                       evaluator: Optional[ConditionEvaluator] = None) -> bool:
    """Boolean form of ``ConditionEvaluator.evaluate``."""
    evaluator = evaluator or ConditionEvaluator()
    return evaluator.evaluate(condition, subject, resource).satisfied

"""
Permission resolver: decides whether a subject may perform an action on a
resource.
"""

import time
from typing import Iterable, List, Optional, Tuple

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .models import Subject, Resource, Action, PermissionRule, Decision
from .conditions import ConditionEvaluator
from .store import RuleStore, RuleInput
from .listing import list_allowed_actions


class PermissionResolver:
    """Allow-list resolver over an ordered rule store.

    A request is granted when any rule for ``(resource.type, action)`` passes
    both its role check and its attribute condition. There are no deny
    rules; no matching rule means deny.
    """

    def __init__(
        self,
        rules: Iterable[RuleInput] = (),
        evaluator: Optional[ConditionEvaluator] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.logger = get_logger("permissions.resolver")
        self.store = RuleStore(rules)
        self.evaluator = evaluator or ConditionEvaluator()
        self.metrics = metrics

    def add_rule(self, rule: RuleInput) -> PermissionRule:
        """Append a rule to the store."""
        stored = self.store.add(rule)
        self.logger.debug("Rule added", resource=stored.resource, action=stored.action)
        return stored

    def get_rules(self) -> Tuple[PermissionRule, ...]:
        """Snapshot of the rules in insertion order."""
        return self.store.all()

    def can(self, subject: Subject, resource: Resource, action: Action) -> bool:
        """True when ``subject`` may perform ``action`` on ``resource``."""
        return self.evaluate(subject, resource, action).allowed

    def evaluate(self, subject: Subject, resource: Resource, action: Action) -> Decision:
        """Evaluate the request and report which rule, if any, granted it."""
        start_time = time.perf_counter()
        evaluated = 0
        condition_errors = 0

        for index, rule in self.store.matching(resource.type, action):
            evaluated += 1

            if rule.allowed_roles is not None and not subject.has_any_role(rule.allowed_roles):
                continue

            if rule.attribute_condition is not None:
                outcome = self.evaluator.evaluate(rule.attribute_condition, subject, resource)
                if not outcome.ok:
                    condition_errors += 1
                    if self.metrics:
                        self.metrics.record_condition_error(resource.type)
                    continue
                if not outcome.satisfied:
                    continue

            return self._finish(
                subject, resource, action, start_time,
                allowed=True,
                reason=f"Rule {index} granted {resource.type}:{action}",
                matched_rule=index,
                evaluated_rules=evaluated,
                condition_errors=condition_errors,
            )

        reason = "No rule matched resource and action" if evaluated == 0 else "No matching rule granted access"
        return self._finish(
            subject, resource, action, start_time,
            allowed=False,
            reason=reason,
            evaluated_rules=evaluated,
            condition_errors=condition_errors,
        )

    def list_allowed_actions(self, subject: Subject, resource: Resource) -> List[str]:
        """Labels ``"<type>:<action>"`` for every action the subject is granted."""
        return list_allowed_actions(self, subject, resource)

    def _finish(self, subject: Subject, resource: Resource, action: Action, start_time: float, **fields) -> Decision:
        duration = time.perf_counter() - start_time
        decision = Decision(evaluation_time_ms=duration * 1000, **fields)

        if self.metrics:
            self.metrics.record_decision(resource.type, action, decision.allowed, duration)

        self.logger.debug(
            "Permission decision",
            subject_id=subject.id,
            resource_type=resource.type,
            resource_id=resource.id,
            action=action,
            allowed=decision.allowed,
            matched_rule=decision.matched_rule,
            reason=decision.reason
        )
        return decision

"""
Append-only, insertion-ordered rule store.
"""

import threading
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .models import PermissionRule


RuleInput = Union[PermissionRule, Mapping[str, Any]]


def to_rule(rule: RuleInput) -> PermissionRule:
    """Accept a rule model or its wire mapping."""
    if isinstance(rule, PermissionRule):
        return rule
    return PermissionRule.model_validate(rule)


class RuleStore:
    """Ordered collection of permission rules.

    Appends go to a private list under a lock. Readers get an immutable
    tuple snapshot, rebuilt lazily after the first read following an append,
    so ``all()`` is safe to iterate while rules are being added.
    """

    def __init__(self, rules: Iterable[RuleInput] = ()):
        self._lock = threading.Lock()
        self._rules: List[PermissionRule] = [to_rule(rule) for rule in rules]
        self._snapshot: Optional[Tuple[PermissionRule, ...]] = None

    def add(self, rule: RuleInput) -> PermissionRule:
        stored = to_rule(rule)
        with self._lock:
            self._rules.append(stored)
            self._snapshot = None
        return stored

    def all(self) -> Tuple[PermissionRule, ...]:
        snapshot = self._snapshot
        if snapshot is None:
            with self._lock:
                if self._snapshot is None:
                    self._snapshot = tuple(self._rules)
                snapshot = self._snapshot
        return snapshot

    def for_resource(self, resource_type: str) -> Tuple[PermissionRule, ...]:
        return tuple(rule for rule in self.all() if rule.resource == resource_type)

    def matching(self, resource_type: str, action: str) -> Tuple[Tuple[int, PermissionRule], ...]:
        """``(index, rule)`` pairs for the rules of ``(resource_type, action)``."""
        return tuple(
            (index, rule) for index, rule in enumerate(self.all()) if rule.matches(resource_type, action)
        )

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[PermissionRule]:
        return iter(self.all())

"""
Build a resolver from an asynchronous rule loader.
"""

from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from shared.logging import get_logger
from shared.errors import RuleLoadError
from shared.metrics import MetricsCollector
from ..rules.models import PermissionRule, RuleSourcePayload
from ..rules.conditions import ConditionEvaluator
from ..rules.resolver import PermissionResolver
from ..rules.store import RuleInput, to_rule

logger = get_logger("permissions.loader")

RuleLoader = Callable[[], Awaitable[Iterable[RuleInput]]]
RuleFetcher = Callable[[], Awaitable[Union[RuleSourcePayload, Mapping[str, Any]]]]


def parse_rules(rules: Iterable[RuleInput]) -> List[PermissionRule]:
    """Validate loader output; a bad entry fails the whole load."""
    parsed = []
    for index, rule in enumerate(rules):
        try:
            parsed.append(to_rule(rule))
        except PydanticValidationError as e:
            raise RuleLoadError(
                f"Invalid rule at index {index}",
                details={"index": index, "errors": e.errors(include_url=False)}
            )
    return parsed


def unwrap_payload(payload: Union[RuleSourcePayload, Mapping[str, Any], List[Any]]) -> List[PermissionRule]:
    """Rules from a ``{"data": [...]}`` envelope; a bare list is accepted too."""
    if isinstance(payload, RuleSourcePayload):
        return list(payload.data)
    if isinstance(payload, list):
        return parse_rules(payload)
    if isinstance(payload, Mapping) and "data" in payload:
        data = payload["data"]
        if not isinstance(data, list):
            raise RuleLoadError("Rule payload 'data' must be a list", details={"type": type(data).__name__})
        return parse_rules(data)
    raise RuleLoadError("Rule payload must contain a 'data' list", details={"type": type(payload).__name__})


async def create_resolver_from_source(
    loader: RuleLoader,
    evaluator: Optional[ConditionEvaluator] = None,
    metrics: Optional[MetricsCollector] = None,
) -> PermissionResolver:
    """Await ``loader`` once and build a resolver over a copy of its rules.

    Loader failures propagate unchanged; there is no retry and no fallback
    rule set.
    """
    try:
        rules = parse_rules(await loader())
    except Exception as e:
        logger.error("Rule load failed", error=str(e), error_type=type(e).__name__)
        if metrics:
            metrics.record_rule_load("failure")
        raise

    if metrics:
        metrics.record_rule_load("success", rule_count=len(rules))
    logger.info("Rules loaded", rule_count=len(rules))
    return PermissionResolver(rules, evaluator=evaluator, metrics=metrics)


async def create_resolver_from_fetcher(
    fetch_rules: RuleFetcher,
    evaluator: Optional[ConditionEvaluator] = None,
    metrics: Optional[MetricsCollector] = None,
) -> PermissionResolver:
    """Same as ``create_resolver_from_source`` for a ``{"data": [...]}`` fetcher."""

    async def _loader() -> List[PermissionRule]:
        return unwrap_payload(await fetch_rules())

    return await create_resolver_from_source(_loader, evaluator=evaluator, metrics=metrics)

"""
Permission client: holds the process's resolver once it has been initialized.

Create one client at startup, initialize it exactly once, and pass it to the
components that need decisions. Reading the resolver before initialization
raises ``ResolverNotInitializedError``.
"""

import asyncio
from typing import Iterable, List, Optional

from prometheus_client import CollectorRegistry

from shared.config import PermissionsSettings, get_settings
from shared.errors import ResolverAlreadyInitializedError, ResolverNotInitializedError
from shared.logging import configure_logging, get_logger
from shared.metrics import MetricsCollector
from .rules.conditions import ConditionEvaluator
from .rules.models import Action, Resource, Subject
from .rules.resolver import PermissionResolver
from .rules.store import RuleInput
from .sources import rule_source_from_settings
from .sources.loader import RuleFetcher, create_resolver_from_fetcher


class PermissionClient:
    """Initialize-once holder for a ``PermissionResolver``."""

    def __init__(self, evaluator: Optional[ConditionEvaluator] = None, metrics: Optional[MetricsCollector] = None):
        self.logger = get_logger("permissions.client")
        self.evaluator = evaluator
        self.metrics = metrics
        self._resolver: Optional[PermissionResolver] = None
        self._init_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._resolver is not None

    async def initialize(self, fetch_rules: RuleFetcher) -> PermissionResolver:
        """Fetch ``{"data": [...]}`` once and build the resolver.

        Fetch failures propagate to the caller and leave the client
        uninitialized.
        """
        async with self._init_lock:
            self._ensure_uninitialized()
            resolver = await create_resolver_from_fetcher(
                fetch_rules, evaluator=self.evaluator, metrics=self.metrics
            )
            self._resolver = resolver

        self.logger.info("Permission client initialized", rule_count=len(resolver.get_rules()))
        return resolver

    def initialize_from_rules(self, rules: Iterable[RuleInput]) -> PermissionResolver:
        """Initialize from rules already in memory."""
        self._ensure_uninitialized()
        self._resolver = PermissionResolver(rules, evaluator=self.evaluator, metrics=self.metrics)
        self.logger.info("Permission client initialized", rule_count=len(self._resolver.get_rules()))
        return self._resolver

    @property
    def resolver(self) -> PermissionResolver:
        if self._resolver is None:
            raise ResolverNotInitializedError()
        return self._resolver

    def get_resolver(self) -> PermissionResolver:
        return self.resolver

    def can(self, subject: Subject, resource: Resource, action: Action) -> bool:
        return self.resolver.can(subject, resource, action)

    def list_allowed_actions(self, subject: Subject, resource: Resource) -> List[str]:
        return self.resolver.list_allowed_actions(subject, resource)

    def _ensure_uninitialized(self):
        if self._resolver is not None:
            raise ResolverAlreadyInitializedError()


async def create_permission_client(
    settings: Optional[PermissionsSettings] = None,
    metrics: Optional[MetricsCollector] = None,
    registry: Optional[CollectorRegistry] = None,
) -> PermissionClient:
    """Startup wiring: logging, metrics and the configured rule source.

    When no collector is passed, one is created on ``registry``, or on the
    global prometheus registry if that is ``None`` as well; the global
    registry only accepts one collector per process.
    """
    settings = settings or get_settings()
    configure_logging(settings.service_name, settings.log_level)

    if metrics is None and settings.enable_metrics:
        metrics = MetricsCollector(settings.service_name, registry=registry)

    client = PermissionClient(metrics=metrics)
    source = rule_source_from_settings(settings)
    await client.initialize(source.fetch_rules)
    return client

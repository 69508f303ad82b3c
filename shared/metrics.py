"""
Shared metrics configuration for the permissions engine.
"""

from typing import Dict, Any, Optional
import threading

from prometheus_client import REGISTRY, Counter, Histogram, Gauge, CollectorRegistry


class MetricsCollector:
    """Prometheus metrics for permission decisions and rule loading.

    Pass a dedicated ``CollectorRegistry`` when more than one collector can
    live in the same process (tests, embedded resolvers); ``None`` registers
    on the global default registry.
    """

    def __init__(self, service_name: str = "permissions", registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up permission metrics."""
        self._metrics["permission_decisions_total"] = Counter(
            "permission_decisions_total",
            "Total permission decisions",
            ["resource_type", "action", "outcome"],
            registry=self.registry
        )

        self._metrics["permission_decision_duration_seconds"] = Histogram(
            "permission_decision_duration_seconds",
            "Permission decision duration in seconds",
            registry=self.registry
        )

        self._metrics["condition_errors_total"] = Counter(
            "condition_errors_total",
            "Attribute conditions that failed to evaluate",
            ["resource_type"],
            registry=self.registry
        )

        self._metrics["rule_loads_total"] = Counter(
            "rule_loads_total",
            "Rule source loads",
            ["status"],
            registry=self.registry
        )

        self._metrics["rules_loaded"] = Gauge(
            "rules_loaded",
            "Number of rules held by the most recently built resolver",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_decision(self, resource_type: str, action: str, allowed: bool, duration: float):
        """Record the outcome and latency of a single decision."""
        self._metrics["permission_decisions_total"].labels(
            resource_type=resource_type,
            action=action,
            outcome="allow" if allowed else "deny"
        ).inc()
        self._metrics["permission_decision_duration_seconds"].observe(duration)

    def record_condition_error(self, resource_type: str):
        """Record a condition that failed closed."""
        self._metrics["condition_errors_total"].labels(resource_type=resource_type).inc()

    def record_rule_load(self, status: str, rule_count: Optional[int] = None):
        """Record a rule load attempt."""
        with self._lock:
            self._metrics["rule_loads_total"].labels(status=status).inc()
            if rule_count is not None:
                self._metrics["rules_loaded"].set(rule_count)

"""
Shared fixtures and factories for the permissions service tests.
"""

import pytest
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field

from prometheus_client import CollectorRegistry

from service_permissions.app.rules.models import Subject, Resource, PermissionRule
from shared.metrics import MetricsCollector


OWNER_CONDITION: Dict[str, Any] = {
    "==": [{"var": "resource.attributes.ownerId"}, {"var": "subject.id"}]
}


@dataclass
class TestUser:
    """Test user data."""
    user_id: str
    roles: List[str]
    attributes: Dict[str, Any] = field(default_factory=dict)

    def to_subject(self) -> Subject:
        return Subject(id=self.user_id, roles=self.roles, attributes=self.attributes)


class TestDataFactory:
    """Factory for creating test data."""

    OWNER_CONDITION = OWNER_CONDITION

    @staticmethod
    def create_test_users() -> List[TestUser]:
        """Create test users."""
        return [
            TestUser(user_id="u1", roles=["viewer"]),
            TestUser(user_id="u2", roles=[]),
            TestUser(user_id="editor-1", roles=["editor"], attributes={"department": "finance", "clearance": 3}),
            TestUser(user_id="admin", roles=["admin", "editor"], attributes={"department": "it", "clearance": 5}),
        ]

    @staticmethod
    def create_subject(subject_id: str = "u1", roles: Optional[List[str]] = None,
                       attributes: Optional[Dict[str, Any]] = None) -> Subject:
        return Subject(id=subject_id, roles=roles if roles is not None else ["viewer"], attributes=attributes or {})

    @staticmethod
    def create_resource(resource_id: str = "d1", resource_type: str = "document",
                        attributes: Optional[Dict[str, Any]] = None) -> Resource:
        return Resource(id=resource_id, type=resource_type, attributes=attributes or {})

    @staticmethod
    def create_rule(resource: str = "document", action: str = "read",
                    allowed_roles: Optional[List[str]] = None,
                    attribute_condition: Optional[Any] = None) -> PermissionRule:
        return PermissionRule(
            resource=resource,
            action=action,
            allowed_roles=allowed_roles,
            attribute_condition=attribute_condition
        )

    @staticmethod
    def create_document_rules() -> List[PermissionRule]:
        """Viewers read documents; owners write them."""
        return [
            PermissionRule(resource="document", action="read", allowed_roles=["viewer"]),
            PermissionRule(resource="document", action="write", attribute_condition=OWNER_CONDITION),
        ]

    @staticmethod
    def create_wire_rules() -> List[Dict[str, Any]]:
        """Rules as they arrive from a rule source."""
        return [
            {"resource": "document", "action": "read", "allowedRoles": ["viewer"]},
            {"resource": "document", "action": "write", "attributeCondition": OWNER_CONDITION},
            {"resource": "invoice", "action": "approve", "allowedRoles": ["admin"],
             "attributeCondition": {">=": [{"var": "subject.attributes.clearance"}, 5]}},
        ]

    @staticmethod
    def create_metrics() -> MetricsCollector:
        """Metrics collector on a private registry."""
        return MetricsCollector("permissions", registry=CollectorRegistry())


def sample_value(collector: MetricsCollector, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
    """Read a sample from the collector's registry."""
    return collector.registry.get_sample_value(name, labels or {})


@pytest.fixture
def factory():
    """Test data factory."""
    return TestDataFactory


@pytest.fixture
def metrics():
    """Metrics collector on a private registry."""
    return TestDataFactory.create_metrics()

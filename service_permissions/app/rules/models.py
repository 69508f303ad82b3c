"""
Data models for the permission decision core.
"""

from typing import Dict, Any, Optional, List, Tuple, Union, Mapping, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Attribute bags hold arbitrary JSON; conditions look values up by dotted path.
JSONValue = Union[None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]]

Action = str


@dataclass(frozen=True)
class Subject:
    """The actor requesting access."""
    id: str
    roles: Tuple[str, ...] = ()
    attributes: Mapping[str, JSONValue] = field(default_factory=dict)

    def __post_init__(self):
        # Accept any sequence of roles; keep an immutable copy
        object.__setattr__(self, "roles", tuple(self.roles or ()))
        object.__setattr__(self, "attributes", dict(self.attributes or {}))

    def has_any_role(self, roles: Sequence[str]) -> bool:
        """True when at least one of ``roles`` is held by the subject."""
        return any(role in self.roles for role in roles)


@dataclass(frozen=True)
class Resource:
    """The object being accessed; ``type`` is the join key against rules."""
    id: str
    type: str
    attributes: Mapping[str, JSONValue] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "attributes", dict(self.attributes or {}))


class PermissionRule(BaseModel):
    """Grants ``action`` on resources of type ``resource``.

    ``allowed_roles`` and ``attribute_condition`` are both optional; when a
    field is missing that half of the check always passes. Wire payloads use
    camelCase keys (``allowedRoles``, ``attributeCondition``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    resource: str = Field(..., description="Resource type the rule applies to")
    action: str = Field(..., description="Action granted by the rule")
    allowed_roles: Optional[Tuple[str, ...]] = Field(
        None, alias="allowedRoles", description="Roles allowed; any role passes when absent"
    )
    attribute_condition: Optional[Any] = Field(
        None, alias="attributeCondition", description="JSON-logic condition; always passes when absent"
    )

    @field_validator("allowed_roles", mode="before")
    @classmethod
    def _roles_as_tuple(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            raise ValueError("allowedRoles must be a list of role names, not a string")
        return tuple(value)

    def matches(self, resource_type: str, action: str) -> bool:
        """Exact, case-sensitive match on resource type and action."""
        return self.resource == resource_type and self.action == action

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with wire (camelCase) keys, omitting absent fields."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        if "allowedRoles" in payload:
            payload["allowedRoles"] = list(payload["allowedRoles"])
        return payload


class RuleSourcePayload(BaseModel):
    """Envelope returned by a rule source: ``{"data": [...]}``."""
    data: List[PermissionRule] = Field(default_factory=list, description="Permission rules")


@dataclass(frozen=True)
class Decision:
    """Outcome of a permission check.

    ``matched_rule`` is the store index of the first rule that granted
    access, or ``None`` on deny.
    """
    allowed: bool
    reason: str
    matched_rule: Optional[int] = None
    evaluated_rules: int = 0
    condition_errors: int = 0
    evaluation_time_ms: float = 0.0

"""
Derived permission listing: every action a subject is granted on a resource.
"""

from typing import TYPE_CHECKING, List

from .models import Subject, Resource

if TYPE_CHECKING:
    from .resolver import PermissionResolver


def format_permission(resource_type: str, action: str) -> str:
    return f"{resource_type}:{action}"


def list_allowed_actions(resolver: "PermissionResolver", subject: Subject, resource: Resource) -> List[str]:
    """Return ``"<type>:<action>"`` labels for each granted action.

    Candidate actions are the distinct actions of the rules for
    ``resource.type``, in order of first appearance; each one is checked
    with ``resolver.can``.
    """
    candidates = dict.fromkeys(rule.action for rule in resolver.store.for_resource(resource.type))

    return [
        format_permission(resource.type, action)
        for action in candidates
        if resolver.can(subject, resource, action)
    ]

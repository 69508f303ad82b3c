"""
Rule sources and the resolver factory.

- loader: awaits a rule loader once and builds a PermissionResolver.
- http_source: fetches ``{"data": [...]}`` payloads over HTTP.
- file_source: reads the same payload (or a bare list) from YAML/JSON.
"""

from shared.config import PermissionsSettings
from shared.errors import ValidationError
from .http_source import HttpRuleSource
from .file_source import FileRuleSource


def rule_source_from_settings(settings: PermissionsSettings):
    """Pick the configured rule source; ``rules_url`` wins over ``rules_file``."""
    if settings.rules_url:
        headers = {}
        if settings.rules_auth_token:
            headers["Authorization"] = f"Bearer {settings.rules_auth_token}"
        return HttpRuleSource(settings.rules_url, timeout=settings.rules_timeout_seconds, headers=headers)
    if settings.rules_file:
        return FileRuleSource(settings.rules_file)
    raise ValidationError(
        "No rule source configured",
        details={"settings": ["PERMISSIONS_RULES_URL", "PERMISSIONS_RULES_FILE"]}
    )

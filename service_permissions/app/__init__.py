"""
Permissions service package.

Decides whether a subject may perform an action on a resource, from a set
of declarative rules combining role membership and JSON-logic attribute
conditions. It provides:

- app.rules: Rule model, store, condition evaluation and the resolver.
- app.sources: Rule sources (HTTP, file) and the resolver factory.
- app.client: Initialize-once client handed to callers at startup.

Guidelines:
- Rules are loaded once at startup and read thereafter.
- Decisions never raise because of a bad condition; they fail closed.
"""

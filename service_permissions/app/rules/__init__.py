"""
Rules package.

Defines the permission rule model and the decision core. A request is
granted when any rule for the resource type and action passes both its role
check and its attribute condition; there are no deny rules.

Modules of interest:
- models: Subject, Resource, PermissionRule and Decision.
- conditions: JSON-logic interpreter and the fail-closed evaluator.
- store: Append-only rule store with snapshot reads.
- resolver: Matching and decision algorithm.
- listing: Every action a subject is granted on a resource.
"""

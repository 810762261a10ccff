"""
Policy functions package.

Modules of interest:
- models: Operator, Rule, PolicyContext and evaluation results.
- functions: Base class shared by the constraint functions.
- data_access: ``DataAccess.level`` constraint function.
- membership: ``MembershipCredential`` constraint function.
- registry: Scope/key bindings used by the policy engine.
"""

"""
Policy Service package for the Dataspace Access Layer.

This package answers one question for the connector's policy engine: does
the calling participant's credential set satisfy a given atomic constraint?
It provides:

- app.main: API surface for constraint evaluation and health.
- app.credentials: Credential model and the credential scanner.
- app.policy: Constraint functions and the function registry.

Guidelines:
- Credentials arrive already verified; nothing here checks signatures.
- Constraint functions are stateless and never raise; they answer False
  and report a problem on the context for usage errors.
"""

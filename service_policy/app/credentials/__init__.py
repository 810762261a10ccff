"""
Credentials package.

Defines the verifiable credential model and the scanner that locates the
first credential of a given type carrying all required claims.

Modules of interest:
- models: Claim values, credentials, participant agents and wire models.
- scanner: Claim schemas, claim extractors and first-match scanning.
"""

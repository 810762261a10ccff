"""
Credential scanning for the Policy Service.

A ``ClaimSchema`` names a credential type and the claims a credential of that
type must carry. ``find_first_credential`` walks the participant's credentials
in the order they were presented and returns the first one that satisfies the
schema. Credentials with missing or malformed claims are skipped, never
treated as errors.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .models import VC_CLAIM, ClaimValue, ParticipantAgent, VerifiableCredential

ClaimExtractor = Callable[[ClaimValue], Optional[Any]]

_datetime_adapter = TypeAdapter(datetime)

# Date and time of day are both required; the offset is optional.
_ISO_DATETIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?")


@dataclass(frozen=True)
class ClaimRequirement:
    """A required claim and how to extract its value."""
    name: str
    extractor: ClaimExtractor


@dataclass(frozen=True)
class ClaimSchema:
    """Credential type plus the claims it must carry."""
    credential_type: str
    requirements: Tuple[ClaimRequirement, ...] = ()

    def extract(self, credential: VerifiableCredential) -> Optional[Dict[str, Any]]:
        """Extract all required claims, or None if any is absent or malformed."""
        values: Dict[str, Any] = {}
        subject = credential.credential_subject
        for requirement in self.requirements:
            claim = subject.claim(requirement.name)
            if claim is None:
                return None
            value = requirement.extractor(claim)
            if value is None:
                return None
            values[requirement.name] = value
        return values


@dataclass(frozen=True)
class CredentialMatch:
    """The selected credential and its extracted claim values."""
    credential: VerifiableCredential
    claims: Dict[str, Any] = field(default_factory=dict)


def scalar(claim: ClaimValue) -> Optional[str]:
    return claim.as_scalar()


def non_empty_scalar(claim: ClaimValue) -> Optional[str]:
    value = claim.as_scalar()
    if not value:
        return None
    return value


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not _ISO_DATETIME.fullmatch(value):
        return None
    try:
        parsed = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timestamp(claim: ClaimValue) -> Optional[datetime]:
    value = claim.as_scalar()
    if not value:
        return None
    return parse_timestamp(value)


def mapping_with(**fields: ClaimExtractor) -> ClaimExtractor:
    """Extractor for a nested mapping claim whose named fields must all extract."""

    def extract(claim: ClaimValue) -> Optional[Dict[str, Any]]:
        if claim.as_mapping() is None:
            return None
        values: Dict[str, Any] = {}
        for name, extractor in fields.items():
            nested = claim.get(name)
            if nested is None:
                return None
            value = extractor(nested)
            if value is None:
                return None
            values[name] = value
        return values

    return extract


def get_credentials(agent: ParticipantAgent) -> Optional[List[Any]]:
    """Return the agent's ``vc`` claim as a list, or None if the claim is absent.

    A present claim that is not a sequence of credentials yields an empty list.
    """
    claims: Mapping[str, Any] = agent.get_claims() or {}
    credentials = claims.get(VC_CLAIM)
    if credentials is None:
        return None
    if isinstance(credentials, (str, bytes)) or not isinstance(credentials, Sequence):
        return []
    return list(credentials)


def find_first_credential(credentials: Sequence[Any], schema: ClaimSchema) -> Optional[CredentialMatch]:
    """Find the first credential of the schema's type carrying all required claims."""
    for credential in credentials:
        if not isinstance(credential, VerifiableCredential):
            continue
        if credential.type != schema.credential_type:
            continue
        values = schema.extract(credential)
        if values is None:
            continue
        return CredentialMatch(credential=credential, claims=values)
    return None

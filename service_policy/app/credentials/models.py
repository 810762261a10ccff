"""
Credential data models for the Policy Service.

Credentials arrive already verified; these types only describe their shape.
Domain objects are frozen dataclasses, while the pydantic models at the
bottom of the module parse the W3C VC JSON used on the HTTP surface.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

VC_CLAIM = "vc"
BASE_CREDENTIAL_TYPE = "VerifiableCredential"


class ClaimKind(str, Enum):
    """Claim value variants."""
    SCALAR = "scalar"
    MAPPING = "mapping"


@dataclass(frozen=True)
class ClaimValue:
    """A claim value: either a string scalar or a nested mapping of claims.

    Accessors return ``None`` instead of raising when the value has the
    other shape, so callers can fail closed.
    """
    kind: ClaimKind
    value: Union[str, Mapping[str, "ClaimValue"]]

    @classmethod
    def wrap(cls, raw: Any) -> Optional["ClaimValue"]:
        """Wrap a raw claim; unsupported shapes (numbers, lists, None) wrap to None."""
        if isinstance(raw, ClaimValue):
            return raw
        if isinstance(raw, str):
            return cls(ClaimKind.SCALAR, raw)
        if isinstance(raw, Mapping):
            entries: Dict[str, ClaimValue] = {}
            for key, item in raw.items():
                wrapped = cls.wrap(item)
                if wrapped is not None:
                    entries[str(key)] = wrapped
            return cls(ClaimKind.MAPPING, MappingProxyType(entries))
        return None

    def as_scalar(self) -> Optional[str]:
        if self.kind is ClaimKind.SCALAR:
            return self.value
        return None

    def as_mapping(self) -> Optional[Mapping[str, "ClaimValue"]]:
        if self.kind is ClaimKind.MAPPING:
            return self.value
        return None

    def get(self, name: str) -> Optional["ClaimValue"]:
        """Look up a nested claim; always None for scalars."""
        mapping = self.as_mapping()
        if mapping is None:
            return None
        return mapping.get(name)


@dataclass(frozen=True)
class CredentialSubject:
    """Subject of a verifiable credential."""
    id: Optional[str] = None
    claims: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))

    def claim(self, name: str) -> Optional[ClaimValue]:
        """Get a claim by its (namespaced) name."""
        return ClaimValue.wrap(self.claims.get(name))


@dataclass(frozen=True)
class VerifiableCredential:
    """Verifiable credential.

    ``type`` is the specific credential type tag, e.g. ``MembershipCredential``.
    """
    type: str
    credential_subject: CredentialSubject = field(default_factory=CredentialSubject)
    id: Optional[str] = None
    issuer: Optional[str] = None


@dataclass(frozen=True)
class ParticipantAgent:
    """Resolved identity of the participant making a request."""
    identity: str
    claims: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))

    def get_claims(self) -> Mapping[str, Any]:
        return self.claims


class CredentialSubjectModel(BaseModel):
    """Wire model for ``credentialSubject``; every extra field is a claim."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Subject identifier")

    def to_subject(self) -> CredentialSubject:
        return CredentialSubject(id=self.id, claims=dict(self.model_extra or {}))


class CredentialModel(BaseModel):
    """Wire model for a verifiable credential."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Credential identifier")
    type: str = Field(..., description="Credential type tag")
    issuer: Optional[str] = Field(None, description="Issuer DID")
    credential_subject: CredentialSubjectModel = Field(
        default_factory=CredentialSubjectModel,
        alias="credentialSubject",
        description="Credential subject and its claims"
    )

    @field_validator("type", mode="before")
    @classmethod
    def _resolve_type(cls, value: Any) -> Any:
        # VC JSON lists the base type first; the specific type follows it
        if isinstance(value, list):
            specific = [t for t in value if isinstance(t, str) and t != BASE_CREDENTIAL_TYPE]
            if specific:
                return specific[-1]
            return BASE_CREDENTIAL_TYPE if value else None
        return value

    def to_credential(self) -> VerifiableCredential:
        return VerifiableCredential(
            type=self.type,
            credential_subject=self.credential_subject.to_subject(),
            id=self.id,
            issuer=self.issuer
        )


class ParticipantAgentModel(BaseModel):
    """Wire model for a participant agent and its presented credentials."""
    identity: str = Field(..., description="Participant identity (DID)")
    claims: Dict[str, Any] = Field(default_factory=dict, description="Additional claims")
    vc: Optional[List[CredentialModel]] = Field(
        None, description="Presented credentials; omit when the participant has no 'vc' claim"
    )

    def to_agent(self) -> ParticipantAgent:
        claims = dict(self.claims)
        claims.pop(VC_CLAIM, None)
        if self.vc is not None:
            claims[VC_CLAIM] = [credential.to_credential() for credential in self.vc]
        return ParticipantAgent(identity=self.identity, claims=claims)

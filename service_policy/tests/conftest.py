"""
Shared fixtures for Policy Service tests.
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

from service_policy.app.credentials.models import (
    CredentialSubject, ParticipantAgent, VerifiableCredential
)
from service_policy.app.policy.models import PolicyContext, Rule, RuleKind

from shared.config import DEFAULT_CREDENTIAL_NAMESPACE as MVD_NAMESPACE


class CredentialFactory:
    """Builders for credentials and participants."""

    @staticmethod
    def data_processor(level: Optional[str] = "processing",
                       contract_version: Optional[str] = "v1.0") -> VerifiableCredential:
        """DataProcessorCredential; pass None to leave a claim out."""
        claims: Dict[str, Any] = {}
        if level is not None:
            claims[MVD_NAMESPACE + "level"] = level
        if contract_version is not None:
            claims[MVD_NAMESPACE + "contractVersion"] = contract_version

        return VerifiableCredential(
            type="DataProcessorCredential",
            credential_subject=CredentialSubject(id="subject-123", claims=claims)
        )

    @staticmethod
    def membership(since: Optional[datetime] = None, status: Optional[str] = "active") -> VerifiableCredential:
        """MembershipCredential; ``since`` defaults to 30 days ago."""
        if since is None:
            since = datetime.now(timezone.utc) - timedelta(days=30)

        membership: Dict[str, Any] = {"since": since.isoformat()}
        if status is not None:
            membership["status"] = status

        return VerifiableCredential(
            type="MembershipCredential",
            credential_subject=CredentialSubject(
                id="subject-123",
                claims={MVD_NAMESPACE + "membership": membership}
            )
        )

    @staticmethod
    def other() -> VerifiableCredential:
        return VerifiableCredential(
            type="OtherCredential",
            credential_subject=CredentialSubject(id="subject-123", claims={"other": "value"})
        )

    @staticmethod
    def participant(credentials: Optional[List[Any]] = None) -> ParticipantAgent:
        """Participant agent; ``credentials=None`` omits the 'vc' claim."""
        claims: Dict[str, Any] = {}
        if credentials is not None:
            claims["vc"] = credentials
        return ParticipantAgent(identity="did:web:consumer", claims=claims)


@pytest.fixture
def credentials():
    """Credential builders."""
    return CredentialFactory


@pytest.fixture
def permission():
    """Permission owning the constraint."""
    return Rule(kind=RuleKind.PERMISSION, uid="permission-1", action="use")


@pytest.fixture
def duty():
    """Duty owning the constraint."""
    return Rule(kind=RuleKind.DUTY, uid="duty-1")


@pytest.fixture
def mock_context():
    """Mock policy context; set ``participant_agent.return_value`` per test."""
    context = MagicMock(spec=PolicyContext)
    context.participant_agent.return_value = None
    return context


@pytest.fixture
def context_for():
    """Build a real PolicyContext for a participant."""
    def build(agent: Optional[ParticipantAgent]) -> PolicyContext:
        return PolicyContext(participant_agent=agent)
    return build

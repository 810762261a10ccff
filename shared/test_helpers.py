"""
Test helper functions and factory methods for the Dataspace Access Layer.
"""

from typing import Dict, Any, Optional, List
from datetime import datetime, timedelta, timezone

from shared.config import DEFAULT_CREDENTIAL_NAMESPACE as MVD_NAMESPACE


def credential_json(credential_type: str, claims: Dict[str, Any],
                    subject_id: str = "did:web:consumer") -> Dict[str, Any]:
    """Build the VC JSON form of a credential."""
    return {
        "id": f"urn:uuid:{credential_type.lower()}-1",
        "type": ["VerifiableCredential", credential_type],
        "issuer": "did:web:issuer",
        "credentialSubject": {"id": subject_id, **claims}
    }


def data_processor_credential_json(level: str = "processing", contract_version: str = "v1.0") -> Dict[str, Any]:
    """Build a DataProcessorCredential in VC JSON form."""
    return credential_json("DataProcessorCredential", {
        MVD_NAMESPACE + "level": level,
        MVD_NAMESPACE + "contractVersion": contract_version
    })


def membership_credential_json(since: Optional[datetime] = None, status: str = "active") -> Dict[str, Any]:
    """Build a MembershipCredential in VC JSON form; ``since`` defaults to 30 days ago."""
    if since is None:
        since = datetime.now(timezone.utc) - timedelta(days=30)
    return credential_json("MembershipCredential", {
        MVD_NAMESPACE + "membership": {"since": since.isoformat(), "status": status}
    })


def participant_json(credentials: Optional[List[Dict[str, Any]]] = None,
                     identity: str = "did:web:consumer") -> Dict[str, Any]:
    """Build the request JSON form of a participant; ``credentials=None`` omits 'vc'."""
    participant: Dict[str, Any] = {"identity": identity, "claims": {}}
    if credentials is not None:
        participant["vc"] = credentials
    return participant

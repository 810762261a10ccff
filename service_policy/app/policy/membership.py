"""
Membership credential constraint function.

The right operand must be ``active``. The constraint is satisfied when the
participant's first well-formed ``MembershipCredential`` has status
``active`` and a ``since`` timestamp that is not in the future.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from shared.config import DEFAULT_CREDENTIAL_NAMESPACE
from shared.metrics import MetricsCollector
from ..credentials.models import ParticipantAgent
from ..credentials.scanner import (
    ClaimRequirement, ClaimSchema, find_first_credential, get_credentials, mapping_with, scalar, timestamp
)
from .functions import MISSING_VC_CLAIM, AtomicConstraintFunction, is_equality, operator_name
from .models import EvaluationResult, Operator, Rule

MEMBERSHIP_CREDENTIAL = "MembershipCredential"
ACTIVE = "active"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MembershipCredentialEvaluationFunction(AtomicConstraintFunction):
    """Evaluates ``MembershipCredential`` constraints."""

    name = "membership_credential"

    def __init__(self, namespace: str = DEFAULT_CREDENTIAL_NAMESPACE, metrics: Optional[MetricsCollector] = None,
                 clock: Callable[[], datetime] = utc_now):
        super().__init__(metrics)
        self.clock = clock
        self.membership_claim = f"{namespace}membership"
        self.schema = ClaimSchema(
            credential_type=MEMBERSHIP_CREDENTIAL,
            requirements=(
                ClaimRequirement(self.membership_claim, mapping_with(since=timestamp, status=scalar)),
            )
        )

    def check(self, operator: Operator, right_operand: str, rule: Optional[Rule],
              agent: Optional[ParticipantAgent]) -> EvaluationResult:
        if not is_equality(operator):
            return EvaluationResult.problem_result(
                f"Invalid operator '{operator_name(operator)}', only accepts 'EQ'"
            )

        if right_operand != ACTIVE:
            return EvaluationResult.problem_result(
                f"Right-operand must be equal to '{ACTIVE}', but was '{right_operand}'"
            )

        if agent is None:
            return EvaluationResult.problem_result("No ParticipantAgent found on context.")

        credentials = get_credentials(agent)
        if credentials is None:
            return EvaluationResult.problem_result(MISSING_VC_CLAIM)
        if not credentials:
            return EvaluationResult.problem_result(
                "ParticipantAgent contains a 'vc' claim but it did not contain any VerifiableCredentials."
            )

        match = find_first_credential(credentials, self.schema)
        if match is None:
            return EvaluationResult.unsatisfied()

        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        membership = match.claims[self.membership_claim]
        started = membership["since"] <= now
        return EvaluationResult(satisfied=membership["status"] == ACTIVE and started)

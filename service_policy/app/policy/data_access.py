"""
Data access level constraint function.

Satisfied when the participant presents a ``DataProcessorCredential`` whose
``level`` claim equals the constraint's right operand. Only credentials that
also carry a non-empty ``contractVersion`` claim are considered.
"""

from typing import Optional

from shared.config import DEFAULT_CREDENTIAL_NAMESPACE
from shared.metrics import MetricsCollector
from ..credentials.models import ParticipantAgent
from ..credentials.scanner import (
    ClaimRequirement, ClaimSchema, find_first_credential, get_credentials, non_empty_scalar, scalar
)
from .functions import MISSING_VC_CLAIM, AtomicConstraintFunction, is_equality, operator_name
from .models import EvaluationResult, Operator, Rule

DATA_PROCESSOR_CREDENTIAL = "DataProcessorCredential"


class DataAccessLevelFunction(AtomicConstraintFunction):
    """Evaluates ``DataAccess.level`` constraints."""

    name = "data_access_level"

    def __init__(self, namespace: str = DEFAULT_CREDENTIAL_NAMESPACE, metrics: Optional[MetricsCollector] = None):
        super().__init__(metrics)
        self.level_claim = f"{namespace}level"
        self.contract_version_claim = f"{namespace}contractVersion"
        self.schema = ClaimSchema(
            credential_type=DATA_PROCESSOR_CREDENTIAL,
            requirements=(
                ClaimRequirement(self.level_claim, scalar),
                ClaimRequirement(self.contract_version_claim, non_empty_scalar),
            )
        )

    def check(self, operator: Operator, right_operand: str, rule: Optional[Rule],
              agent: Optional[ParticipantAgent]) -> EvaluationResult:
        if not is_equality(operator):
            return EvaluationResult.problem_result(
                f"Cannot evaluate operator {operator_name(operator)}, only EQ is supported"
            )

        if agent is None:
            return EvaluationResult.problem_result("ParticipantAgent not found on PolicyContext")

        credentials = get_credentials(agent)
        if credentials is None:
            return EvaluationResult.problem_result(MISSING_VC_CLAIM)

        match = find_first_credential(credentials, self.schema)
        if match is None:
            return EvaluationResult.unsatisfied()

        return EvaluationResult(satisfied=match.claims[self.level_claim] == right_operand)

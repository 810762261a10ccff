"""
Constraint function registry for the Policy Service.

The policy engine looks functions up by scope and constraint left operand.
Each lookup evaluates exactly one atomic constraint; combining constraints
into a decision is the engine's job.
"""

from typing import Any, Dict, List, Optional, Tuple

from shared.config import DEFAULT_CREDENTIAL_NAMESPACE
from shared.errors import PolicyConfigurationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .data_access import DataAccessLevelFunction
from .functions import AtomicConstraintFunction
from .membership import MembershipCredentialEvaluationFunction
from .models import Operator, PolicyContext, Rule

DATA_ACCESS_LEVEL_KEY = "DataAccess.level"
MEMBERSHIP_CREDENTIAL_KEY = "MembershipCredential"

CATALOG_SCOPE = "catalog"
NEGOTIATION_SCOPE = "contract.negotiation"
TRANSFER_PROCESS_SCOPE = "transfer.process"

POLICY_SCOPES = (CATALOG_SCOPE, NEGOTIATION_SCOPE, TRANSFER_PROCESS_SCOPE)


class PolicyFunctionRegistry:
    """Maps (scope, left operand) pairs to constraint functions."""

    def __init__(self):
        self.logger = get_logger("policy.registry")
        self._functions: Dict[Tuple[str, str], AtomicConstraintFunction] = {}

    def register(self, scope: str, key: str, function: AtomicConstraintFunction) -> None:
        """Bind a function; a scope/key pair can only be bound once."""
        if (scope, key) in self._functions:
            raise PolicyConfigurationError(
                f"A function is already bound for '{key}' in scope '{scope}'",
                details={"scope": scope, "left_operand": key}
            )
        self._functions[(scope, key)] = function
        self.logger.info("Constraint function registered", scope=scope, left_operand=key, function=function.name)

    def get(self, scope: str, key: str) -> Optional[AtomicConstraintFunction]:
        return self._functions.get((scope, key))

    def bindings(self) -> List[Tuple[str, str, AtomicConstraintFunction]]:
        """All bindings, sorted by scope then key."""
        return [
            (scope, key, function)
            for (scope, key), function in sorted(self._functions.items(), key=lambda item: item[0])
        ]

    def evaluate_constraint(self, scope: str, left_operand: str, operator: Operator, right_operand: Any,
                            rule: Optional[Rule], context: PolicyContext) -> bool:
        """Evaluate one atomic constraint with the function bound for it."""
        function = self.get(scope, left_operand)
        if function is None:
            message = f"No function bound for '{left_operand}' in scope '{scope}'"
            context.report_problem(message)
            self.logger.warning("Unbound constraint", scope=scope, left_operand=left_operand)
            return False

        return function.evaluate(operator, right_operand, rule, context)


def create_default_registry(namespace: str = DEFAULT_CREDENTIAL_NAMESPACE,
                            metrics: Optional[MetricsCollector] = None) -> PolicyFunctionRegistry:
    """Bind the credential functions in every policy scope."""
    registry = PolicyFunctionRegistry()
    data_access = DataAccessLevelFunction(namespace=namespace, metrics=metrics)
    membership = MembershipCredentialEvaluationFunction(namespace=namespace, metrics=metrics)

    for scope in POLICY_SCOPES:
        registry.register(scope, DATA_ACCESS_LEVEL_KEY, data_access)
        registry.register(scope, MEMBERSHIP_CREDENTIAL_KEY, membership)

    return registry

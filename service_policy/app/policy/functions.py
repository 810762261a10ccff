"""
Base class and shared guards for credential-backed constraint functions.
"""

import time
from typing import Any, Optional

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..credentials.models import ParticipantAgent
from .models import EvaluationResult, Operator, PolicyContext, Rule

MISSING_VC_CLAIM = "ParticipantAgent did not contain a 'vc' claim."


def operator_name(operator: Any) -> str:
    """Render an operator the way problems report it, e.g. ``GT``."""
    if isinstance(operator, Operator):
        return operator.name
    return str(operator)


def is_equality(operator: Any) -> bool:
    return operator == Operator.EQ


class AtomicConstraintFunction:
    """Credential-backed constraint function.

    Subclasses implement ``check``, which is a pure function of its inputs
    and returns an ``EvaluationResult``. ``evaluate`` is the entry point used
    by the policy engine: it resolves the participant from the context,
    forwards at most one problem to the context and returns a bool.
    Instances hold no mutable state and may be shared between threads.
    """

    name = "constraint"

    def __init__(self, metrics: Optional[MetricsCollector] = None):
        self.logger = get_logger(f"policy.{self.name}")
        self.metrics = metrics

    def check(self, operator: Operator, right_operand: Any, rule: Optional[Rule],
              agent: Optional[ParticipantAgent]) -> EvaluationResult:
        raise NotImplementedError

    def evaluate(self, operator: Operator, right_operand: Any, rule: Optional[Rule],
                 context: PolicyContext) -> bool:
        """Evaluate the constraint for the participant on ``context``."""
        start_time = time.time()

        try:
            result = self.check(operator, right_operand, rule, context.participant_agent())
        except Exception as e:
            self.logger.error("Constraint function error", function=self.name, error=str(e), exc_info=True)
            result = EvaluationResult.problem_result(f"Error evaluating '{self.name}': {e}")

        if result.problem is not None:
            context.report_problem(result.problem)
            self.logger.warning(
                "Constraint evaluation problem",
                function=self.name,
                operator=operator_name(operator),
                problem=result.problem
            )
        else:
            self.logger.debug(
                "Constraint evaluated",
                function=self.name,
                operator=operator_name(operator),
                satisfied=result.satisfied
            )

        if self.metrics is not None:
            self.metrics.record_policy_evaluation(self.name, result.outcome, time.time() - start_time)

        return result.satisfied

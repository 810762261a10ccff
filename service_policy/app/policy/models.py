"""
Policy data models for the Policy Service.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from ..credentials.models import ParticipantAgent, ParticipantAgentModel


class Operator(str, Enum):
    """Constraint operators (ODRL)."""
    EQ = "EQ"
    NEQ = "NEQ"
    GT = "GT"
    GEQ = "GEQ"
    LT = "LT"
    LEQ = "LEQ"
    IN = "IN"
    HAS_PART = "HAS_PART"
    IS_A = "IS_A"
    IS_ALL_OF = "IS_ALL_OF"
    IS_ANY_OF = "IS_ANY_OF"
    IS_NONE_OF = "IS_NONE_OF"


class RuleKind(str, Enum):
    """Kinds of policy rule."""
    PERMISSION = "permission"
    DUTY = "duty"
    PROHIBITION = "prohibition"


@dataclass(frozen=True)
class Rule:
    """Permission, duty or prohibition owning the constraint being evaluated."""
    kind: RuleKind = RuleKind.PERMISSION
    uid: Optional[str] = None
    action: Optional[str] = None


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of one constraint function call.

    ``problem`` is set only for usage or structural errors; a plain
    "does not qualify" outcome has ``satisfied=False`` and no problem.
    """
    satisfied: bool
    problem: Optional[str] = None

    @classmethod
    def unsatisfied(cls) -> "EvaluationResult":
        return cls(satisfied=False)

    @classmethod
    def problem_result(cls, message: str) -> "EvaluationResult":
        return cls(satisfied=False, problem=message)

    @property
    def outcome(self) -> str:
        if self.problem is not None:
            return "problem"
        return "satisfied" if self.satisfied else "unsatisfied"


class PolicyContext:
    """Per-evaluation context: the calling participant and a problem sink."""

    def __init__(self, participant_agent: Optional[ParticipantAgent] = None, scope: Optional[str] = None):
        self._participant_agent = participant_agent
        self.scope = scope
        self._problems: List[str] = []

    def participant_agent(self) -> Optional[ParticipantAgent]:
        return self._participant_agent

    def report_problem(self, message: str) -> None:
        self._problems.append(message)

    @property
    def problems(self) -> Tuple[str, ...]:
        return tuple(self._problems)


class RuleModel(BaseModel):
    """Wire model for the rule owning a constraint."""
    kind: RuleKind = Field(RuleKind.PERMISSION, description="Rule kind")
    uid: Optional[str] = Field(None, description="Rule identifier")
    action: Optional[str] = Field(None, description="Rule action, e.g. 'use'")

    def to_rule(self) -> Rule:
        return Rule(kind=self.kind, uid=self.uid, action=self.action)


class ConstraintEvaluationRequest(BaseModel):
    """Request model for evaluating a single atomic constraint."""
    scope: str = Field(..., description="Policy scope, e.g. 'contract.negotiation'")
    left_operand: str = Field(..., description="Constraint key, e.g. 'DataAccess.level'")
    operator: Operator = Field(..., description="Constraint operator")
    right_operand: str = Field(..., description="Expected value")
    rule: RuleModel = Field(default_factory=RuleModel, description="Owning rule")
    participant: Optional[ParticipantAgentModel] = Field(
        None, description="Calling participant; omit when no participant was resolved"
    )


class ConstraintEvaluationResponse(BaseModel):
    """Response model for a single constraint evaluation."""
    satisfied: bool = Field(..., description="Whether the constraint is satisfied")
    problems: List[str] = Field(default_factory=list, description="Reported problems")


class FunctionBindingResponse(BaseModel):
    """A registered constraint function."""
    scope: str
    left_operand: str
    function: str


class FunctionBindingListResponse(BaseModel):
    """Response model for the registered constraint functions."""
    bindings: List[FunctionBindingResponse]
    total: int

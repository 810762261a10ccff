"""
Policy service for the Dataspace Access Layer.
"""

from fastapi import HTTPException

from shared.base_service import BaseService
from shared.errors import AccessLayerException
from shared.logging import set_participant_context

from .policy.models import (
    ConstraintEvaluationRequest, ConstraintEvaluationResponse,
    FunctionBindingListResponse, FunctionBindingResponse, PolicyContext
)
from .policy.registry import create_default_registry


class PolicyService(BaseService):
    """Policy service implementation."""

    def __init__(self):
        super().__init__("policy", 8014)

        self.registry = create_default_registry(
            namespace=self.config.credential_namespace,
            metrics=self.metrics
        )

        self._setup_policy_routes()

    def _setup_policy_routes(self):
        """Set up policy-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "policy",
                "message": "Dataspace Access Layer - Policy Service",
                "version": "1.0.0",
                "capabilities": ["data_access_level", "membership_credential"]
            }

        @self.app.get("/policy/functions", response_model=FunctionBindingListResponse)
        async def get_functions():
            """List the registered constraint functions."""
            bindings = [
                FunctionBindingResponse(scope=scope, left_operand=key, function=function.name)
                for scope, key, function in self.registry.bindings()
            ]
            return FunctionBindingListResponse(bindings=bindings, total=len(bindings))

        @self.app.post("/policy/evaluate", response_model=ConstraintEvaluationResponse)
        async def evaluate_constraint(request: ConstraintEvaluationRequest):
            """Evaluate a single constraint for the supplied participant."""
            try:
                agent = request.participant.to_agent() if request.participant else None
                set_participant_context(
                    participant_id=agent.identity if agent else None,
                    policy_scope=request.scope
                )

                context = PolicyContext(participant_agent=agent, scope=request.scope)
                satisfied = self.registry.evaluate_constraint(
                    request.scope,
                    request.left_operand,
                    request.operator,
                    request.right_operand,
                    request.rule.to_rule(),
                    context
                )

                self.logger.info(
                    "Constraint evaluated",
                    scope=request.scope,
                    left_operand=request.left_operand,
                    satisfied=satisfied,
                    problems=len(context.problems)
                )

                return ConstraintEvaluationResponse(satisfied=satisfied, problems=list(context.problems))

            except AccessLayerException:
                raise
            except Exception as e:
                self.logger.error("Error evaluating constraint", error=str(e))
                raise HTTPException(status_code=500, detail="Internal server error")


def create_app():
    """Create policy service application."""
    service = PolicyService()
    return service.app


if __name__ == "__main__":
    service = PolicyService()
    service.run()

"""
Unit tests for the constraint function registry.
"""

import pytest

from shared.errors import PolicyConfigurationError
from shared.metrics import get_metrics_collector
from service_policy.app.policy.data_access import DataAccessLevelFunction
from service_policy.app.policy.membership import MembershipCredentialEvaluationFunction
from service_policy.app.policy.models import Operator
from service_policy.app.policy.registry import (
    DATA_ACCESS_LEVEL_KEY, MEMBERSHIP_CREDENTIAL_KEY, NEGOTIATION_SCOPE, POLICY_SCOPES,
    PolicyFunctionRegistry, create_default_registry
)


class TestPolicyFunctionRegistry:
    """Test cases for PolicyFunctionRegistry."""

    @pytest.fixture
    def registry(self):
        """Create the default registry."""
        return create_default_registry()

    def test_default_bindings(self, registry):
        """Test both functions are bound in every scope."""
        bindings = registry.bindings()

        assert len(bindings) == 2 * len(POLICY_SCOPES)
        for scope in POLICY_SCOPES:
            assert isinstance(registry.get(scope, DATA_ACCESS_LEVEL_KEY), DataAccessLevelFunction)
            assert isinstance(registry.get(scope, MEMBERSHIP_CREDENTIAL_KEY), MembershipCredentialEvaluationFunction)

    def test_bindings_sorted(self, registry):
        """Test bindings are sorted by scope then key."""
        keys = [(scope, key) for scope, key, _ in registry.bindings()]

        assert keys == sorted(keys)

    def test_get_unknown(self, registry):
        """Test unknown bindings are not found."""
        assert registry.get("catalog", "Unknown.key") is None
        assert registry.get("unknown.scope", DATA_ACCESS_LEVEL_KEY) is None

    def test_register_duplicate(self):
        """Test binding the same scope and key twice."""
        registry = PolicyFunctionRegistry()
        registry.register("catalog", DATA_ACCESS_LEVEL_KEY, DataAccessLevelFunction())

        with pytest.raises(PolicyConfigurationError) as exc_info:
            registry.register("catalog", DATA_ACCESS_LEVEL_KEY, DataAccessLevelFunction())

        assert exc_info.value.code == "POLICY_CONFIGURATION_ERROR"
        assert exc_info.value.details == {"scope": "catalog", "left_operand": DATA_ACCESS_LEVEL_KEY}

    def test_evaluate_constraint(self, registry, credentials, permission, context_for):
        """Test dispatching to the bound function."""
        context = context_for(credentials.participant([credentials.data_processor()]))

        result = registry.evaluate_constraint(
            NEGOTIATION_SCOPE, DATA_ACCESS_LEVEL_KEY, Operator.EQ, "processing", permission, context
        )

        assert result is True
        assert context.problems == ()

    def test_evaluate_unbound_constraint(self, registry, credentials, permission, context_for):
        """Test unbound constraints report a problem."""
        context = context_for(credentials.participant([credentials.data_processor()]))

        result = registry.evaluate_constraint(
            "policy.monitor", DATA_ACCESS_LEVEL_KEY, Operator.EQ, "processing", permission, context
        )

        assert result is False
        assert context.problems == ("No function bound for 'DataAccess.level' in scope 'policy.monitor'",)

    def test_evaluate_records_metrics(self, credentials, permission, context_for):
        """Test evaluations are counted by outcome."""
        metrics = get_metrics_collector("policy")
        registry = create_default_registry(metrics=metrics)

        registry.evaluate_constraint(
            NEGOTIATION_SCOPE, MEMBERSHIP_CREDENTIAL_KEY, Operator.EQ, "active", permission,
            context_for(credentials.participant([credentials.membership()]))
        )
        registry.evaluate_constraint(
            NEGOTIATION_SCOPE, MEMBERSHIP_CREDENTIAL_KEY, Operator.GT, "active", permission,
            context_for(credentials.participant([credentials.membership()]))
        )

        sample = metrics.registry.get_sample_value
        labels = {"function": "membership_credential"}
        assert sample("policy_evaluations_total", {**labels, "outcome": "satisfied"}) == 1.0
        assert sample("policy_evaluations_total", {**labels, "outcome": "problem"}) == 1.0
        assert sample("policy_evaluations_total", {**labels, "outcome": "unsatisfied"}) is None

"""Tests for drift detection and late initialization."""

from __future__ import annotations

from types import SimpleNamespace

from cloudflare_operator.models.loadbalancing import (
    LoadBalancerObservation,
    LoadBalancerParameters,
    MonitorObservation,
    MonitorParameters,
)
from cloudflare_operator.models.optional import UNSET
from cloudflare_operator.reconciler.diff import (
    FieldCategory,
    FieldRule,
    drifted_fields,
    is_up_to_date,
    late_initialize,
)
from cloudflare_operator.reconciler.loadbalancing import LOAD_BALANCER_FIELD_RULES, MONITOR_FIELD_RULES


class TestScalar:
    """Test cases for SCALAR fields."""

    rules = [FieldRule("ttl", "ttl")]

    def test_unset_is_dont_care(self):
        assert is_up_to_date(self.rules, SimpleNamespace(ttl=UNSET), SimpleNamespace(ttl=300))

    def test_equal(self):
        assert is_up_to_date(self.rules, SimpleNamespace(ttl=30), SimpleNamespace(ttl=30))

    def test_different(self):
        assert drifted_fields(self.rules, SimpleNamespace(ttl=30), SimpleNamespace(ttl=60)) == ["ttl"]

    def test_explicit_zero_is_compared(self):
        rules = [FieldRule("proxied", "proxied")]
        assert not is_up_to_date(rules, SimpleNamespace(proxied=False), SimpleNamespace(proxied=True))


class TestScalarDefault:
    """Test cases for SCALAR_DEFAULT fields."""

    def test_unset_matches_zero_observed(self):
        rules = [FieldRule("description", "description", FieldCategory.SCALAR_DEFAULT)]
        assert is_up_to_date(rules, SimpleNamespace(description=UNSET), SimpleNamespace(description=""))

    def test_unset_against_non_default_drifts(self):
        rules = [FieldRule("description", "description", FieldCategory.SCALAR_DEFAULT)]
        drifted = drifted_fields(rules, SimpleNamespace(description=UNSET), SimpleNamespace(description="x"))
        assert drifted == ["description"]

    def test_declared_default(self):
        rules = [FieldRule("logpush", "logpush", FieldCategory.SCALAR_DEFAULT, default=False)]
        assert is_up_to_date(rules, SimpleNamespace(logpush=UNSET), SimpleNamespace(logpush=False))
        assert not is_up_to_date(rules, SimpleNamespace(logpush=UNSET), SimpleNamespace(logpush=True))
        assert is_up_to_date(rules, SimpleNamespace(logpush=True), SimpleNamespace(logpush=True))


class TestCollections:
    """Test cases for LIST_LENGTH and MAP_KEYS fields."""

    def test_list_order_does_not_matter(self):
        rules = [FieldRule("pools", "pools", FieldCategory.LIST_LENGTH)]
        assert is_up_to_date(rules, SimpleNamespace(pools=["a", "b"]), SimpleNamespace(pools=["b", "a"]))

    def test_list_length_change(self):
        rules = [FieldRule("pools", "pools", FieldCategory.LIST_LENGTH)]
        assert drifted_fields(rules, SimpleNamespace(pools=["a", "b"]), SimpleNamespace(pools=["a"])) == ["pools"]

    def test_unset_list_compared_as_empty(self):
        rules = [FieldRule("pools", "pools", FieldCategory.LIST_LENGTH)]
        assert not is_up_to_date(rules, SimpleNamespace(pools=UNSET), SimpleNamespace(pools=["a"]))
        assert is_up_to_date(rules, SimpleNamespace(pools=UNSET), SimpleNamespace(pools=[]))

    def test_map_keys(self):
        rules = [FieldRule("regions", "regions", FieldCategory.MAP_KEYS)]
        assert is_up_to_date(
            rules,
            SimpleNamespace(regions={"WNAM": ["a"]}),
            SimpleNamespace(regions={"WNAM": ["b", "c"]}),
        )
        assert not is_up_to_date(
            rules,
            SimpleNamespace(regions={"WNAM": ["a"]}),
            SimpleNamespace(regions={"WNAM": ["a"], "ENAM": ["a"]}),
        )
        assert not is_up_to_date(rules, SimpleNamespace(regions=UNSET), SimpleNamespace(regions={"WNAM": []}))


class TestLoadBalancerRules:
    """Drift scenarios for load balancers."""

    def test_pool_count_drift(self):
        spec = LoadBalancerParameters.from_spec({"zone": "z1", "name": "lb1", "defaultPools": ["p1", "p2"]})
        observed = LoadBalancerObservation(id="lb-1", name="lb1", default_pools=["p1"])

        assert drifted_fields(LOAD_BALANCER_FIELD_RULES, spec, observed) == ["defaultPools"]

    def test_unset_default_pools_against_observed(self):
        spec = LoadBalancerParameters.from_spec({"zone": "z1", "name": "lb1"})
        observed = LoadBalancerObservation(id="lb-1", name="lb1", default_pools=["p1"])

        assert "defaultPools" in drifted_fields(LOAD_BALANCER_FIELD_RULES, spec, observed)

    def test_matching(self):
        spec = LoadBalancerParameters.from_spec(
            {"zone": "z1", "name": "lb1", "defaultPools": ["p1"], "fallbackPool": "p1", "ttl": 30}
        )
        observed = LoadBalancerObservation(
            id="lb-1", name="lb1", default_pools=["p1"], fallback_pool="p1", ttl=30, proxied=True
        )

        assert is_up_to_date(LOAD_BALANCER_FIELD_RULES, spec, observed)


class TestLateInitialize:
    """Test cases for late_initialize."""

    def test_adopts_unset_fields(self):
        spec = MonitorParameters.from_spec({"type": "https"})
        observed = MonitorObservation(id="m1", type="https", method="GET", interval=60, timeout=5)

        adopted = late_initialize(MONITOR_FIELD_RULES, spec, observed)

        assert adopted["method"] == "GET"
        assert adopted["interval"] == 60
        assert spec.method == "GET"

    def test_never_overwrites_declared(self):
        spec = MonitorParameters.from_spec({"type": "https", "method": "HEAD"})
        observed = MonitorObservation(id="m1", type="https", method="GET")

        adopted = late_initialize(MONITOR_FIELD_RULES, spec, observed)

        assert "method" not in adopted
        assert spec.method == "HEAD"

    def test_skips_zero_values(self):
        spec = MonitorParameters.from_spec({"type": "https"})
        observed = MonitorObservation(id="m1", type="https", path="", port=0)

        adopted = late_initialize(MONITOR_FIELD_RULES, spec, observed)

        assert "path" not in adopted
        assert "port" not in adopted

    def test_adopts_false_booleans(self):
        spec = MonitorParameters.from_spec({"type": "https"})
        observed = MonitorObservation(id="m1", type="https", follow_redirects=False)

        adopted = late_initialize(MONITOR_FIELD_RULES, spec, observed)

        assert adopted["followRedirects"] is False

    def test_second_pass_adopts_nothing(self):
        spec = MonitorParameters.from_spec({"type": "https"})
        observed = MonitorObservation(id="m1", type="https", method="GET", description="edge health")

        assert late_initialize(MONITOR_FIELD_RULES, spec, observed)
        assert late_initialize(MONITOR_FIELD_RULES, spec, observed) == {}

    def test_scalar_default_is_never_adopted(self):
        rules = [FieldRule("description", "description", FieldCategory.SCALAR_DEFAULT, late_init=True)]
        spec = SimpleNamespace(description=UNSET)

        assert late_initialize(rules, spec, SimpleNamespace(description="customized")) == {}
        assert spec.description is UNSET

    def test_rules_without_late_init_are_ignored(self):
        rules = [FieldRule("monitor", "monitor")]
        spec = SimpleNamespace(monitor=UNSET)

        assert late_initialize(rules, spec, SimpleNamespace(monitor="m1")) == {}
        assert spec.monitor is UNSET

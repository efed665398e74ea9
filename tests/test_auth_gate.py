"""
Access gate tests

Loading, sign-in redirect with return path, role checks, tolerance of
malformed auth state, and ProtectedRoute's re-evaluation on each render.
"""

from types import SimpleNamespace

import pytest

from auth_gate import (
    LOADING,
    AuthState,
    AuthUser,
    GateState,
    ProtectedRoute,
    Role,
    encode_uri_component,
    evaluate_gate,
    sign_in_url,
)


def signed_in(role=None):
    return AuthState(is_loaded=True, is_signed_in=True, user=AuthUser(id="u1", role=role))


class TestRole:
    """Tests for Role.parse()."""

    def test_known_roles(self):
        assert Role.parse("vendor") is Role.VENDOR
        assert Role.parse("admin") is Role.ADMIN

    def test_case_and_whitespace_variants_are_unknown(self):
        assert Role.parse(" Admin ") is Role.UNKNOWN
        assert Role.parse("VENDOR") is Role.UNKNOWN

    def test_unknown_and_missing(self):
        assert Role.parse("moderator") is Role.UNKNOWN
        assert Role.parse(42) is Role.UNKNOWN
        assert Role.parse(None) is None


class TestEvaluateGate:
    """Tests for evaluate_gate()."""

    @pytest.mark.parametrize("signed, user", [(False, None), (True, AuthUser(id="u1")), (True, None)])
    def test_loading_wins_over_everything(self, signed, user):
        decision = evaluate_gate(AuthState(is_loaded=False, is_signed_in=signed, user=user), required_role="admin")
        assert decision.state is GateState.RESOLVING
        assert decision.redirect_to is None

    def test_signed_out_redirects_with_return_path(self):
        decision = evaluate_gate(
            AuthState(is_loaded=True, is_signed_in=False),
            current_path="/dashboard/settings?tab=profile",
        )
        assert decision.state is GateState.REDIRECTING
        assert decision.redirect_to == "/sign-in?redirect_url=%2Fdashboard%2Fsettings%3Ftab%3Dprofile"

    def test_no_current_path_means_no_parameter(self):
        assert evaluate_gate(AuthState(is_loaded=True), current_path="").redirect_to == "/sign-in"
        assert evaluate_gate(AuthState(is_loaded=True)).redirect_to == "/sign-in"

    def test_custom_sign_in_target_keeps_return_path(self):
        decision = evaluate_gate(AuthState(is_loaded=True), current_path="/current-path", redirect_to="/custom-login")
        assert decision.redirect_to == "/custom-login?redirect_url=%2Fcurrent-path"

    def test_role_mismatch_goes_to_unauthorized(self):
        decision = evaluate_gate(signed_in(Role.COLLECTOR), required_role="admin", current_path="/admin?x=1")
        assert decision.state is GateState.REDIRECTING
        assert decision.redirect_to == "/unauthorized"

    def test_missing_role_claim_is_a_mismatch(self):
        decision = evaluate_gate(signed_in(None), required_role="vendor")
        assert decision.redirect_to == "/unauthorized"

    def test_unknown_role_never_matches(self):
        user = SimpleNamespace(id="u1", role="moderator")
        state = SimpleNamespace(is_loaded=True, is_signed_in=True, user=user)
        assert evaluate_gate(state, required_role="moderator").redirect_to == "/unauthorized"

    def test_null_user_while_signed_in_is_signed_out(self):
        decision = evaluate_gate(AuthState(is_loaded=True, is_signed_in=True, user=None), current_path="/cart")
        assert decision.state is GateState.REDIRECTING
        assert decision.redirect_to == "/sign-in?redirect_url=%2Fcart"

    def test_none_state_does_not_raise(self):
        assert evaluate_gate(None).state is GateState.REDIRECTING

    def test_role_claim_as_plain_string(self):
        user = SimpleNamespace(id="u1", role="vendor")
        state = SimpleNamespace(is_loaded=True, is_signed_in=True, user=user)
        assert evaluate_gate(state, required_role=Role.VENDOR).state is GateState.AUTHORIZED

    @pytest.mark.parametrize("claim, required", [(" ADMIN ", "admin"), ("VENDOR", "vendor"), ("Vendor ", Role.VENDOR)])
    def test_role_claim_must_match_exactly(self, claim, required):
        user = SimpleNamespace(id="u1", role=claim)
        state = SimpleNamespace(is_loaded=True, is_signed_in=True, user=user)
        decision = evaluate_gate(state, required_role=required)
        assert decision.state is GateState.REDIRECTING
        assert decision.redirect_to == "/unauthorized"

    def test_authorized(self):
        assert evaluate_gate(signed_in(Role.ADMIN), required_role="admin").state is GateState.AUTHORIZED
        assert evaluate_gate(signed_in(None)).state is GateState.AUTHORIZED


class TestRedirectUrl:
    """Tests for sign_in_url() and encode_uri_component()."""

    def test_matches_encode_uri_component(self):
        assert encode_uri_component("/a b/ü?x=1&y=(2)!*'~") == "%2Fa%20b%2F%C3%BC%3Fx%3D1%26y%3D(2)!*'~"

    def test_appends_to_existing_query(self):
        assert sign_in_url("/sign-in?mode=modal", "/cart") == "/sign-in?mode=modal&redirect_url=%2Fcart"


class FakeNavigator:
    def __init__(self, path):
        self.current_path = path
        self.pushed = []

    def push(self, path):
        self.pushed.append(path)


class TestProtectedRoute:
    """Tests for ProtectedRoute."""

    def test_renders_content_when_authorized(self):
        route = ProtectedRoute(lambda: signed_in(Role.VENDOR), FakeNavigator("/vendor"), required_role="vendor")
        assert route.render("dashboard") == "dashboard"

    def test_renders_loading_without_navigating(self):
        nav = FakeNavigator("/vendor")
        route = ProtectedRoute(lambda: AuthState(is_loaded=False), nav)
        assert route.render("dashboard") is LOADING
        assert nav.pushed == []

    def test_redirect_pushes_and_renders_nothing(self):
        nav = FakeNavigator("/orders")
        route = ProtectedRoute(lambda: AuthState(is_loaded=True), nav)
        assert route.render("orders") is None
        assert nav.pushed == ["/sign-in?redirect_url=%2Forders"]

    def test_no_duplicate_navigation_once_at_target(self):
        nav = FakeNavigator("/admin")
        route = ProtectedRoute(lambda: signed_in(Role.COLLECTOR), nav, required_role="admin")
        route.render("admin")
        nav.current_path = "/unauthorized"
        route.render("admin")
        assert nav.pushed == ["/unauthorized"]

    def test_role_change_mid_session_is_picked_up(self):
        """The decision is recomputed from the live auth state on every render."""
        state = {"auth": signed_in(Role.VENDOR)}
        nav = FakeNavigator("/vendor/products")
        route = ProtectedRoute(lambda: state["auth"], nav, required_role="vendor")

        assert route.render("listings") == "listings"
        state["auth"] = signed_in(Role.COLLECTOR)
        assert route.render("listings") is None
        assert nav.pushed == ["/unauthorized"]

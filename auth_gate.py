"""Role-based access control for protected views.

`evaluate_gate` is a pure decision over the current auth state: show a
loading placeholder, show the protected content, or redirect. It never
raises; anything it cannot make sense of is treated as signed out.
`ProtectedRoute` wraps a view and re-runs the decision on every render.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Union
from urllib.parse import quote

from config import SIGN_IN_PATH, UNAUTHORIZED_PATH

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves alone besides [A-Za-z0-9_.~-].
_URI_COMPONENT_SAFE = "!*'()"


class Role(str, Enum):
    COLLECTOR = "collector"
    VENDOR = "vendor"
    ADMIN = "admin"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Map a role claim to a Role by exact value; None stays None, anything else is UNKNOWN."""
        if value is None:
            return None
        if isinstance(value, Role):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return cls.UNKNOWN
        return cls.UNKNOWN


@dataclass(frozen=True)
class AuthUser:
    id: str
    role: Optional[Role] = None
    email: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class AuthState:
    is_loaded: bool = False
    is_signed_in: bool = False
    user: Optional[AuthUser] = None


class GateState(str, Enum):
    RESOLVING = "resolving"
    AUTHORIZED = "authorized"
    REDIRECTING = "redirecting"


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    redirect_to: Optional[str] = None


RESOLVING = GateDecision(GateState.RESOLVING)
AUTHORIZED = GateDecision(GateState.AUTHORIZED)


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def sign_in_url(redirect_to: str, current_path: Optional[str]) -> str:
    """Sign-in target carrying the path to come back to, if there is one."""
    if not current_path:
        return redirect_to
    separator = "&" if "?" in redirect_to else "?"
    return f"{redirect_to}{separator}redirect_url={encode_uri_component(current_path)}"


def role_satisfies(role: Optional[Role], required_role: Optional[Role]) -> bool:
    if required_role is None:
        return True
    if role is None or role is Role.UNKNOWN:
        return False
    return role == required_role


def evaluate_gate(
    auth: Optional[AuthState],
    required_role: Union[Role, str, None] = None,
    current_path: Optional[str] = None,
    redirect_to: Optional[str] = None,
) -> GateDecision:
    if auth is not None and getattr(auth, "is_loaded", True) is False:
        return RESOLVING

    user = getattr(auth, "user", None)
    if getattr(auth, "is_signed_in", False) is not True or user is None:
        return GateDecision(GateState.REDIRECTING, sign_in_url(redirect_to or SIGN_IN_PATH, current_path))

    required = Role.parse(required_role) if required_role else None
    if not role_satisfies(Role.parse(getattr(user, "role", None)), required):
        return GateDecision(GateState.REDIRECTING, UNAUTHORIZED_PATH)

    return AUTHORIZED


class Navigator(Protocol):
    @property
    def current_path(self) -> Optional[str]:
        ...

    def push(self, path: str) -> None:
        ...


LOADING = object()  # placeholder rendered while auth is resolving


class ProtectedRoute:
    """Wraps a view; `render` returns the content, LOADING, or None after navigating away.

    No decision is cached: each render reads the auth provider afresh, so a
    role change mid-session takes effect on the next render.
    """

    def __init__(self, auth_provider: Callable[[], Optional[AuthState]], navigator: Navigator,
                 required_role: Union[Role, str, None] = None, redirect_to: Optional[str] = None):
        self.auth_provider = auth_provider
        self.navigator = navigator
        self.required_role = required_role
        self.redirect_to = redirect_to

    def decide(self) -> GateDecision:
        return evaluate_gate(
            self.auth_provider(),
            required_role=self.required_role,
            current_path=self.navigator.current_path,
            redirect_to=self.redirect_to,
        )

    def render(self, content: Any) -> Any:
        decision = self.decide()
        if decision.state is GateState.RESOLVING:
            return LOADING
        if decision.state is GateState.REDIRECTING:
            if self.navigator.current_path != decision.redirect_to:
                logger.info(f"Redirecting {self.navigator.current_path!r} to {decision.redirect_to}")
                self.navigator.push(decision.redirect_to)
            return None
        return content

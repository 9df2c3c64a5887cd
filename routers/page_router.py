"""
Page routing and route guards for the Streamlit front end.

Guards are pure functions of the Session, evaluated on every render
before any page content is drawn:

    ALLOW     render the page
    REDIRECT  render nothing, move to redirect_to
    PENDING   render nothing yet (token known, profile still loading)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from models.session_models import Session
from services.session_service import LOGIN_PATH

HOME_PATH = "/"
DASHBOARD_PATH = "/dashboard"


class Decision(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    PENDING = "pending"


@dataclass(frozen=True)
class GuardDecision:
    decision: Decision
    redirect_to: Optional[str] = None

    @classmethod
    def allow(cls) -> "GuardDecision":
        return cls(Decision.ALLOW)

    @classmethod
    def redirect(cls, path: str) -> "GuardDecision":
        return cls(Decision.REDIRECT, path)

    @classmethod
    def pending(cls) -> "GuardDecision":
        return cls(Decision.PENDING)


Guard = Callable[[Session], GuardDecision]


def require_authenticated(session: Session) -> GuardDecision:
    if not session.is_authenticated:
        return GuardDecision.redirect(LOGIN_PATH)
    if session.user is None:
        return GuardDecision.pending()
    return GuardDecision.allow()


def require_admin(session: Session) -> GuardDecision:
    if not session.is_authenticated:
        return GuardDecision.redirect(LOGIN_PATH)
    if session.user is None:
        return GuardDecision.pending()
    if not session.is_admin:
        return GuardDecision.redirect(DASHBOARD_PATH)
    return GuardDecision.allow()


@dataclass(frozen=True)
class Route:
    pattern: str
    page: str
    guard: Optional[Guard] = None

    def match(self, path: str) -> Optional[Dict[str, str]]:
        pattern_parts = [p for p in self.pattern.split("/") if p]
        path_parts = [p for p in path.split("/") if p]

        wildcard = bool(pattern_parts) and pattern_parts[-1] == "*"
        if wildcard:
            pattern_parts = pattern_parts[:-1]
            if len(path_parts) < len(pattern_parts):
                return None
            path_parts = path_parts[:len(pattern_parts)]
        elif len(path_parts) != len(pattern_parts):
            return None

        params = {}
        for expected, actual in zip(pattern_parts, path_parts):
            if expected.startswith("{") and expected.endswith("}"):
                params[expected[1:-1]] = actual
            elif expected != actual:
                return None
        return params


ROUTES: List[Route] = [
    Route("/", "home"),
    Route("/login", "login"),
    Route("/register", "register"),
    Route("/dashboard", "dashboard", require_authenticated),
    Route("/upload", "upload", require_authenticated),
    Route("/analysis/{file_id}", "analysis", require_authenticated),
    Route("/admin/*", "admin", require_admin),
]


def match_route(path: str, routes: List[Route] = ROUTES) -> Tuple[Route, Dict[str, str]]:
    """Unknown paths land on the home page."""
    for route in routes:
        params = route.match(path)
        if params is not None:
            return route, params
    return routes[0], {}


@dataclass
class Resolution:
    route: Route
    params: Dict[str, str] = field(default_factory=dict)
    decision: GuardDecision = field(default_factory=GuardDecision.allow)


def resolve(path: str, session: Session) -> Resolution:
    route, params = match_route(path)
    decision = route.guard(session) if route.guard else GuardDecision.allow()
    return Resolution(route, params, decision)


class Navigator:
    """
    Current location of one UI session.
    redirect() also flags that the page being drawn is stale.
    """

    def __init__(self, path: str = HOME_PATH):
        self.path = path
        self._redirected = False

    def navigate(self, path: str) -> None:
        self.path = path

    def redirect(self, path: str) -> None:
        self.path = path
        self._redirected = True

    def consume_redirect(self) -> bool:
        redirected, self._redirected = self._redirected, False
        return redirected

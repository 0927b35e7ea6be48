from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import RedirectResponse

from store_sales.config import get_settings
from store_sales.core.constants import LOGIN_PATH

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


def dashboard_auth_enabled() -> bool:
    settings = get_settings()
    return bool(settings.DASHBOARD_USERNAME and (settings.DASHBOARD_PASSWORD or settings.DASHBOARD_PASSWORD_HASH))


def _hash_password(password: str, salt: str, rounds: int) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    )
    return digest.hex()


def verify_dashboard_credentials(username: str, password: str) -> bool:
    settings = get_settings()
    if not dashboard_auth_enabled():
        return False

    username = username.strip()
    password = password.strip()

    expected_username = settings.DASHBOARD_USERNAME.strip()
    if not hmac.compare_digest(username.casefold(), expected_username.casefold()):
        return False

    if settings.DASHBOARD_PASSWORD_HASH:
        if not settings.DASHBOARD_PASSWORD_SALT:
            raise ValueError("Dashboard password salt is not configured.")
        computed = _hash_password(
            password,
            settings.DASHBOARD_PASSWORD_SALT,
            settings.DASHBOARD_PBKDF2_ROUNDS,
        )
        return hmac.compare_digest(computed, settings.DASHBOARD_PASSWORD_HASH)

    if settings.DASHBOARD_PASSWORD:
        return hmac.compare_digest(password, settings.DASHBOARD_PASSWORD.strip())

    return False


@dataclass(frozen=True)
class AuthSession:
    user: str


class AuthNotifier:
    """Single channel for sign-in / sign-out events."""

    def __init__(self):
        self._listeners: list[Callable[[str, Optional[AuthSession]], None]] = []

    def subscribe(self, listener: Callable[[str, Optional[AuthSession]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: str, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            listener(event, session)


def log_auth_event(event: str, session: Optional[AuthSession]) -> None:
    logger.info("Auth event %s (user=%s)", event, session.user if session else None)


class SessionProvider:
    """Session state kept in the signed session cookie of ``request``."""

    def __init__(self, request: Request, notifier: Optional[AuthNotifier] = None):
        self._request = request
        if notifier is None:
            notifier = getattr(request.app.state, "auth_notifier", None)
        self._notifier = notifier

    def get_current_session(self) -> Optional[AuthSession]:
        user = self._request.session.get(SESSION_USER_KEY)
        if not user:
            return None
        return AuthSession(user=user)

    def sign_in(self, user: str) -> AuthSession:
        self._request.session[SESSION_USER_KEY] = user
        session = AuthSession(user=user)
        if self._notifier is not None:
            self._notifier.publish(SIGNED_IN, session)
        return session

    def sign_out(self) -> None:
        previous = self.get_current_session()
        self._request.session.clear()
        if self._notifier is not None:
            self._notifier.publish(SIGNED_OUT, previous)


@dataclass(frozen=True)
class AuthContext:
    """What templates know about the visitor."""

    user: Optional[str]
    auth_enabled: bool

    @property
    def signed_in(self) -> bool:
        return self.user is not None


def auth_context(request: Request) -> AuthContext:
    session = SessionProvider(request).get_current_session()
    return AuthContext(user=session.user if session else None, auth_enabled=dashboard_auth_enabled())


class GateState(str, Enum):
    CHECKING = "checking"
    RESOLVED = "resolved"


class AuthGate:
    """Guards a protected page: one session lookup, then redirect or render.

    With login disabled (no credentials configured) every visitor is let through.
    """

    def __init__(self, provider: SessionProvider, login_path: str = LOGIN_PATH):
        self._provider = provider
        self._login_path = login_path
        self.state = GateState.CHECKING
        self.session: Optional[AuthSession] = None

    def check(self) -> Optional[RedirectResponse]:
        if self.state is GateState.RESOLVED:
            return None
        if not dashboard_auth_enabled():
            self.state = GateState.RESOLVED
            return None
        self.session = self._provider.get_current_session()
        if self.session is None:
            return RedirectResponse(url=self._login_path, status_code=303)
        self.state = GateState.RESOLVED
        return None

    def render(self, render_fn: Callable[[], object]):
        redirect = self.check()
        if redirect is not None:
            return redirect
        return render_fn()


def protected_page(request: Request, render_fn: Callable[[], object]):
    return AuthGate(SessionProvider(request)).render(render_fn)


def require_login_api(request: Request) -> None:
    if not dashboard_auth_enabled():
        return
    if SessionProvider(request).get_current_session() is not None:
        return
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")


__all__ = [
    "AuthContext",
    "AuthGate",
    "AuthNotifier",
    "AuthSession",
    "GateState",
    "SessionProvider",
    "auth_context",
    "dashboard_auth_enabled",
    "log_auth_event",
    "protected_page",
    "require_login_api",
    "verify_dashboard_credentials",
]

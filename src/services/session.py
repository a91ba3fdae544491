"""
Session Service
Google Sign-In session shell: ID-token decoding, token storage and listeners.
"""

import asyncio
import base64
import binascii
from collections.abc import Callable, MutableMapping
from enum import Enum

import orjson
from pydantic import BaseModel, ValidationError as PydanticValidationError

from core import get_logger
from core.id import new_session_id


logger = get_logger(__name__)

TOKEN_STORAGE_KEY = "google_id_token"


class AuthError(Exception):
    """Authentication failed or is required."""


class AuthState(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class User(BaseModel):
    """Signed-in user, taken from the ID-token claims."""
    sub: str
    name: str = ""
    picture: str = ""
    email: str = ""


AuthListener = Callable[[User | None], None]


def decode_id_token(token: str) -> User:
    """
    Decode the payload segment of a JWT.

    The signature is not verified; the token is trusted as handed over by
    the identity provider's client library.

    Raises:
        AuthError: Token is not a three-part JWT or the payload is unreadable
    """
    parts = token.split(".")
    if len(parts) != 3 or not parts[1]:
        raise AuthError("Malformed ID token")

    segment = parts[1]
    padded = segment + "=" * (-len(segment) % 4)
    try:
        claims = orjson.loads(base64.urlsafe_b64decode(padded))
    except (binascii.Error, ValueError) as e:
        raise AuthError("Unreadable ID token payload") from e

    if not isinstance(claims, dict):
        raise AuthError("Unreadable ID token payload")

    try:
        return User.model_validate(claims)
    except PydanticValidationError as e:
        raise AuthError("ID token is missing user claims") from e


class SessionContext:
    """
    Authentication state for one browser session.

    Listeners are plain callables invoked with the current user (or None)
    immediately on subscription and after every sign-in, sign-out and
    initialization.
    """

    def __init__(self, token_store: MutableMapping[str, str] | None = None) -> None:
        self.id = new_session_id()
        self._token_store: MutableMapping[str, str] = token_store if token_store is not None else {}
        self._user: User | None = None
        self._listeners: list[AuthListener] = []
        self._ready = asyncio.Event()

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    @property
    def auth_state(self) -> AuthState:
        if not self._ready.is_set():
            return AuthState.LOADING
        return AuthState.AUTHENTICATED if self._user is not None else AuthState.UNAUTHENTICATED

    def initialize(self) -> None:
        """Restore a stored token, mark ready and notify. Repeat calls are no-ops."""
        if self._ready.is_set():
            return

        stored = self._token_store.get(TOKEN_STORAGE_KEY)
        if stored:
            try:
                self._user = decode_id_token(stored)
            except AuthError as e:
                logger.warning("stored_token_invalid", error=str(e))
                self._token_store.pop(TOKEN_STORAGE_KEY, None)

        self._ready.set()
        logger.info("session_ready", session=self.id, signed_in=self._user is not None)
        self._notify()

    async def wait_ready(self) -> None:
        await self._ready.wait()

    def sign_in(self, credential: str) -> User:
        """
        Accept an ID token from the identity provider.

        Raises:
            AuthError: Token cannot be decoded
        """
        user = decode_id_token(credential)
        self._token_store[TOKEN_STORAGE_KEY] = credential
        self._user = user
        self._ready.set()
        logger.info("signed_in", session=self.id, user=user.sub)
        self._notify()
        return user

    def sign_out(self) -> None:
        previous = self._user
        self._user = None
        self._token_store.pop(TOKEN_STORAGE_KEY, None)
        logger.info("signed_out", session=self.id, user=previous.sub if previous else None)
        self._notify()

    def on_auth_change(self, listener: AuthListener) -> Callable[[], None]:
        """
        Subscribe to auth changes.

        Returns:
            Function removing the listener
        """
        self._listeners.append(listener)
        listener(self._user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def require_user(self) -> User:
        """
        Raises:
            AuthError: Nobody is signed in
        """
        if self._user is None:
            raise AuthError("Sign in required")
        return self._user

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._user)

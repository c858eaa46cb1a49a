"""
Admin sign-in state with change notification.

Views subscribe with on_change() to be told when the signed-in admin changes;
the migration console uses this to lock or unlock batch operations.
"""
from typing import Any, Callable, MutableMapping, Optional

from utils.api import APIClient
from utils.errors import error_message

Listener = Callable[[Optional[dict]], None]


class AuthSession:
    """Signed-in admin stored in a session state mapping."""

    def __init__(self, state: MutableMapping[str, Any], api: APIClient):
        self.state = state
        self.api = api
        self._listeners: list[Listener] = []

    @property
    def token(self) -> Optional[str]:
        return self.state.get("token")

    @property
    def user(self) -> Optional[dict]:
        return self.state.get("user")

    @property
    def is_signed_in(self) -> bool:
        return bool(self.token and self.user)

    @property
    def is_admin(self) -> bool:
        return self.is_signed_in and bool(self.user.get("is_admin"))

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new user (or None) on every change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.user)

    def _set_status(self, success: bool, message: str) -> tuple[bool, str]:
        self.state["auth_status"] = {"success": success, "message": message}
        return success, message

    def _clear(self):
        self.state["token"] = None
        self.state["user"] = None

    def sign_in(self, email: str, password: str) -> tuple[bool, str]:
        """Sign in; returns (success, message) and notifies listeners on success."""
        email = (email or "").strip()
        if not email or not password:
            return self._set_status(False, "Please enter both email and password")

        result = self.api.login(email, password)
        if result.get("status") != 200:
            return self._set_status(False, error_message(result, "Authentication failed"))

        self.state["token"] = result["data"]["access_token"]
        profile = self.api.get_me()
        if profile.get("status") != 200:
            self._clear()
            return self._set_status(False, error_message(profile, "Authentication failed"))

        self.state["user"] = profile["data"]
        self._notify()
        return self._set_status(True, f"Signed in as {self.user.get('email', email)}")

    def sign_out(self) -> tuple[bool, str]:
        """Revoke the token and forget the admin."""
        if not self.token:
            return self._set_status(True, "Signed out")

        result = self.api.logout()
        if result.get("status") not in (200, 401):
            return self._set_status(False, f"Sign out failed: {error_message(result)}")

        self._clear()
        self._notify()
        return self._set_status(True, "Signed out")

    def restore(self) -> bool:
        """
        Re-check a stored token; forget it if the backend no longer accepts it.

        Returns:
            True if an admin is still signed in
        """
        if not self.token:
            return False
        profile = self.api.get_me()
        if profile.get("status") == 200:
            self.state["user"] = profile["data"]
            return True
        if profile.get("status") in (401, 403):
            self._clear()
            self._notify()
            self._set_status(False, error_message(profile, "Session expired"))
        return False

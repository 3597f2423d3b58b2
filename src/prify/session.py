"""Current-user accessor."""

from dataclasses import dataclass

from .exceptions import NotAuthenticatedError


@dataclass
class Session:
    """Identity of the user the application acts for.

    A session without a ``user_id`` means nobody is signed in.
    """

    user_id: str | None = None

    def get_user(self) -> str | None:
        """Return the current user id, or None when signed out."""
        return self.user_id or None

    def require_user(self) -> str:
        """Return the current user id or raise NotAuthenticatedError."""
        user_id = self.get_user()
        if user_id is None:
            raise NotAuthenticatedError()
        return user_id

    @property
    def is_authenticated(self) -> bool:
        return self.get_user() is not None

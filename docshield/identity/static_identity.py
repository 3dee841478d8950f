from docshield.documents.exceptions import IdentityError
from docshield.identity.base import BaseIdentityProvider, User


class StaticIdentityProvider(BaseIdentityProvider):
    """Identity fixed by configuration (single-operator deployments, CLI)."""

    def __init__(self, email: str) -> None:
        self._email = email.strip()

    def current_user(self) -> User:
        if not self._email:
            raise IdentityError(
                "No authenticated user: set CURRENT_USER_EMAIL to identify the operator"
            )
        return User(email=self._email)

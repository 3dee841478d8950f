from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    email: str


class BaseIdentityProvider(ABC):
    """Contract for the user-identity collaborator."""

    @abstractmethod
    def current_user(self) -> User:
        """Return the authenticated user.

        Raises:
            IdentityError: if nobody is authenticated.
        """

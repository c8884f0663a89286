"""Identity of the caller on whose behalf an operation runs."""

from dataclasses import dataclass

from recruitmatch.utils.constants import UserRole


@dataclass(frozen=True)
class Principal:
    """An authenticated caller, as forwarded by the authentication gateway."""

    user_id: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return UserRole(self.role).is_staff

    def can_access_candidate(self, candidate_id: str) -> bool:
        """Staff can see any candidate; candidates only themselves."""
        return self.is_staff or str(candidate_id) == str(self.user_id)

    @classmethod
    def system(cls) -> "Principal":
        """Principal used by operator tooling such as the CLI."""
        return cls(user_id="system", role=UserRole.ADMIN)

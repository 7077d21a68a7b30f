"""
Profile domain model.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from portfolio_ledger.core.utils.validation import validate_identifier


@dataclass(frozen=True)
class ProfileDefaults:
    """Display fields used when a profile is created on first sight."""

    email: str = ""
    full_name: str = ""
    avatar_url: str = ""


@dataclass
class Profile:
    """Internal record for one external identity.

    Created lazily by the identity resolver and never deleted.
    """

    id: str
    external_id: str
    email: str = ""
    full_name: str = ""
    avatar_url: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate identifiers after initialization."""
        self.id = validate_identifier(self.id, "id")
        self.external_id = validate_identifier(self.external_id, "external_id")

    @classmethod
    def create(cls, profile_id: str, external_id: str, defaults: ProfileDefaults) -> "Profile":
        """Factory method to create a profile from display defaults."""
        now = datetime.now(UTC)
        return cls(
            id=profile_id,
            external_id=external_id,
            email=defaults.email,
            full_name=defaults.full_name,
            avatar_url=defaults.avatar_url,
            created_at=now,
            updated_at=now,
        )

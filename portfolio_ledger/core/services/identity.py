"""
Identity resolver.

Maps an external user identifier (from the identity provider) to an internal
profile, creating the profile on first sight.
"""

from dataclasses import replace
from datetime import UTC, datetime

from loguru import logger

from portfolio_ledger.core.exceptions.ledger import NotFoundError
from portfolio_ledger.core.interfaces.storage import ILedgerStorage
from portfolio_ledger.core.models.profile import Profile, ProfileDefaults
from portfolio_ledger.core.utils.identifiers import generate_id
from portfolio_ledger.core.utils.validation import validate_identifier


class IdentityResolver:
    """Resolves external identities to profiles."""

    def __init__(self, storage: ILedgerStorage) -> None:
        self.storage = storage

    def resolve(self, external_id: str, defaults: ProfileDefaults | None = None) -> Profile:
        """Return the profile for external_id, creating it if absent.

        Idempotent and atomic: concurrent calls with the same external_id
        always yield the same profile.

        Args:
            external_id: Opaque identifier supplied by the identity provider
            defaults: Display fields used only when the profile is created

        Returns:
            The existing or newly created Profile
        """
        external_id = validate_identifier(external_id, "external_id")
        seed = defaults or ProfileDefaults()

        profile, created = self.storage.profiles.get_or_create(
            external_id, lambda: Profile.create(generate_id(), external_id, seed)
        )
        if created:
            logger.info(f"Created profile {profile.id} for external identity {external_id}")
        return profile

    def get(self, external_id: str) -> Profile:
        """Return the profile for external_id without creating one."""
        external_id = validate_identifier(external_id, "external_id")
        profile = self.storage.profiles.get_by_external_id(external_id)
        if profile is None:
            raise NotFoundError("Profile", external_id)
        return profile

    def update(
        self,
        external_id: str,
        *,
        email: str | None = None,
        full_name: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile:
        """Update display fields of an existing profile."""
        profile_id = self.get(external_id).id
        with self.storage.profile_lock(profile_id):
            profile = self.get(external_id)
            changes = {
                key: value
                for key, value in {
                    "email": email,
                    "full_name": full_name,
                    "avatar_url": avatar_url,
                }.items()
                if value is not None
            }
            if not changes:
                return profile

            updated = replace(profile, **changes, updated_at=datetime.now(UTC))
            self.storage.profiles.save(updated)
            logger.debug(f"Updated profile {profile.id}: {sorted(changes)}")
            return updated

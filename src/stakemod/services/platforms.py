"""Registry of content platforms allowed to submit requests."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from stakemod.db.upsert import insert_if_absent
from stakemod.models import Platform
from stakemod.services.clock import get_ledger_counter
from stakemod.services.errors import NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

__all__ = ["PlatformRegistry"]


class PlatformRegistry:
    """Registration and activity state of platforms, keyed by caller identity."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, identity: str, *, for_update: bool = False) -> Platform | None:
        """Return a platform by identity."""
        return self.db.get(Platform, identity, with_for_update=for_update, populate_existing=for_update)

    def register(self, identity: str, name: str) -> Platform:
        """Upsert the caller's platform record.

        Re-registering overwrites the name, reactivates the platform and resets
        its request counter to zero; earlier history is not merged.
        """
        created = insert_if_absent(
            self.db,
            Platform,
            {"identity": identity, "name": name, "active": True, "request_count": 0},
        )
        platform = self.db.get(Platform, identity, with_for_update=True, populate_existing=True)
        if created:
            # Only the caller that inserted the row counts it.
            counter = get_ledger_counter(self.db, for_update=True)
            counter.platform_count += 1
            logger.info("Registered platform %s (%s)", identity, name)
        else:
            platform.name = name
            platform.active = True
            platform.request_count = 0
            logger.info("Re-registered platform %s (%s); request counter reset", identity, name)
        return platform

    def deactivate(self, identity: str) -> Platform:
        """Mark the caller's platform inactive.

        Raises:
            NotFoundError: If the caller never registered.
        """
        platform = self.get(identity, for_update=True)
        if platform is None:
            raise NotFoundError(f"Platform {identity} is not registered")
        platform.active = False
        logger.info("Deactivated platform %s", identity)
        return platform

    def require_active(self, identity: str) -> Platform:
        """Return the caller's platform, locked, if it may submit requests.

        Raises:
            UnauthorizedError: If the caller is unregistered or inactive.
        """
        platform = self.get(identity, for_update=True)
        if platform is None or not platform.active:
            raise UnauthorizedError(f"{identity} is not an active platform")
        return platform

    def count(self) -> int:
        """Return how many distinct identities ever registered."""
        return int(get_ledger_counter(self.db).platform_count)

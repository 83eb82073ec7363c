from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Union
from uuid import UUID

from glucosmart.core.datastore import ShareLinkStore
from glucosmart.models.share import ShareLink

logger = logging.getLogger(__name__)


class ShareLinkError(Exception):
    """Base error for share link operations."""


class ShareLinkNotFound(ShareLinkError):
    pass


class ShareLinkExpired(ShareLinkError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShareLinkService:
    """Temporary public links carrying a JSON snapshot chosen by the patient."""

    def __init__(
        self,
        store: ShareLinkStore,
        public_base_url: str,
        ttl_hours: int = 24,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.public_base_url = public_base_url.rstrip("/")
        self.ttl = timedelta(hours=ttl_hours)
        self.clock = clock or _utcnow

    def url_for(self, link_id: UUID) -> str:
        return f"{self.public_base_url}/share/{link_id}"

    def create(self, data: dict[str, Any]) -> tuple[ShareLink, str]:
        if not isinstance(data, dict):
            raise TypeError("share data must be a JSON object")

        now = self.clock()
        link = ShareLink(
            id=uuid.uuid4(),
            data=data,
            expires_at=now + self.ttl,
            created_at=now,
        )
        self.store.add(link)
        logger.info("Share link %s created, expires at %s", link.id, link.expires_at.isoformat())
        return link, self.url_for(link.id)

    def resolve(self, link_id: Union[UUID, str]) -> ShareLink:
        try:
            key = link_id if isinstance(link_id, UUID) else UUID(str(link_id))
        except ValueError as exc:
            raise ShareLinkNotFound(str(link_id)) from exc

        link = self.store.get(key)
        if link is None:
            raise ShareLinkNotFound(str(key))
        if link.is_expired(self.clock()):
            raise ShareLinkExpired(str(key))
        return link

    def purge_expired(self) -> int:
        removed = self.store.delete_expired(self.clock())
        if removed:
            logger.info("Purged %d expired share links", removed)
        return removed

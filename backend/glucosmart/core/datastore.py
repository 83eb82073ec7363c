from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from uuid import UUID

from glucosmart.models.share import ShareLink


class JsonStore:
    def __init__(self, path: Path, default: Any):
        self.path = path
        self.default = default
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> Any:
        if not self.path.exists():
            self.save(self.default)
            return self.default
        with self.path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def save(self, data: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)


class ShareLinkStore(JsonStore):
    def __init__(self, path: Path):
        super().__init__(path, default=[])

    def all(self) -> list[ShareLink]:
        return [ShareLink.model_validate(item) for item in self.load()]

    def add(self, link: ShareLink) -> ShareLink:
        links = self.load()
        links.append(link.model_dump(mode="json"))
        self.save(links)
        return link

    def get(self, link_id: UUID) -> Optional[ShareLink]:
        key = str(link_id)
        for item in self.load():
            if item.get("id") == key:
                return ShareLink.model_validate(item)
        return None

    def delete_expired(self, now: datetime) -> int:
        links = self.all()
        alive = [link for link in links if not link.is_expired(now)]
        removed = len(links) - len(alive)
        if removed:
            self.save([link.model_dump(mode="json") for link in alive])
        return removed

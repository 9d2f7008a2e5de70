from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    # 2025-01-01T12:00:00.000Z, the same shape a browser's Date#toJSON gives
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{ts.microsecond // 1000:03d}Z"
    )


def default_image_for(name: str) -> str:
    """Image path used when a genre is created without one."""
    return f"/images/{''.join(name.lower().split())}.jpg"


@dataclass
class Genre:
    id: int = 0
    name: str = ""
    description: str = ""
    image: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }


@dataclass
class GenrePatch:
    """
    A partial update. A field left as None is not being changed.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None

    def is_empty(self) -> bool:
        return self.name is None and self.description is None and self.image is None


@dataclass
class BulkDeleteResult:
    deleted: list[Genre] = field(default_factory=list)
    not_found: list = field(default_factory=list)

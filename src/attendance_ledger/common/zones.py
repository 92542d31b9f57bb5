from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


@dataclass
class ZoneRegistry:
    """Recognized reporting zones.

    Zones are configuration data: only names listed here are accepted by
    queries, and each one must exist in the tz database.
    """

    organization_zone: str
    allowed: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        self.allowed = frozenset(self.allowed) | {self.organization_zone}
        self._cache: dict[str, ZoneInfo] = {}
        for name in self.allowed:
            self._cache[name] = _load(name)

    @classmethod
    def from_names(cls, organization_zone: str, names: Iterable[str]) -> "ZoneRegistry":
        return cls(organization_zone=organization_zone, allowed=frozenset(n.strip() for n in names if n.strip()))

    @property
    def organization(self) -> ZoneInfo:
        return self._cache[self.organization_zone]

    def resolve(self, name: str | None) -> ZoneInfo:
        if not name:
            return self.organization
        zone = self._cache.get(name.strip())
        if zone is None:
            raise ValidationError(f"Unsupported time zone: {name!r}")
        return zone

    def is_organization(self, zone: ZoneInfo) -> bool:
        return zone.key == self.organization_zone


def _load(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown IANA time zone: {name!r}") from None

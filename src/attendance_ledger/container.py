from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional

from .common.zones import ZoneRegistry
from .core.constants import DEFAULT_ALLOWED_ZONES, DEFAULT_ORGANIZATION_ZONE, DEFAULT_SKEW_TOLERANCE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventLedgerService
from .reconciliation.engine import ReconciliationEngine
from .reconciliation.factory import policy_for
from .reconciliation.service import AttendanceSummaryService
from .temporal.index import TemporalIndex
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import IdentityService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    events_repo: EventRepository
    zones: ZoneRegistry

    identity_service: IdentityService
    ledger_service: EventLedgerService
    temporal_index: TemporalIndex
    summary_service: AttendanceSummaryService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    users_repo: UserRepository,
    events_repo: EventRepository,
    organization_zone: str = DEFAULT_ORGANIZATION_ZONE,
    allowed_zones: Iterable[str] = DEFAULT_ALLOWED_ZONES,
    day_attribution: str = "clock_in_day",
    skew_tolerance_seconds: int = DEFAULT_SKEW_TOLERANCE_SECONDS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    zones = ZoneRegistry.from_names(organization_zone, allowed_zones)

    identity_service = IdentityService(users_repo)
    ledger_service = EventLedgerService(events_repo, zones)
    temporal_index = TemporalIndex(events_repo, zones)
    engine = ReconciliationEngine(
        policy=policy_for(day_attribution),
        skew_tolerance=timedelta(seconds=int(skew_tolerance_seconds)),
    )
    summary_service = AttendanceSummaryService(users_repo, temporal_index, engine)

    return Container(
        users_repo=users_repo,
        events_repo=events_repo,
        zones=zones,
        identity_service=identity_service,
        ledger_service=ledger_service,
        temporal_index=temporal_index,
        summary_service=summary_service,
        conn=conn,
    )


def build_container(*, settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        events_repo=MySQLEventRepository(conn),
        organization_zone=getattr(settings, "ORGANIZATION_ZONE", DEFAULT_ORGANIZATION_ZONE),
        allowed_zones=getattr(settings, "ALLOWED_ZONES", DEFAULT_ALLOWED_ZONES),
        day_attribution=getattr(settings, "DAY_ATTRIBUTION", "clock_in_day"),
        skew_tolerance_seconds=getattr(settings, "SKEW_TOLERANCE_SECONDS", DEFAULT_SKEW_TOLERANCE_SECONDS),
        conn=conn,
    )

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .aggregation.scheduler import DailySweepScheduler
from .aggregation.service import Aggregator
from .common.clock import Clock, OverridableClock
from .core.constants import DEFAULT_STATE_FILE, DEFAULT_SWEEP_HOUR, DEFAULT_SWEEP_MINUTE
from .database.connection import DBConfig, DatabaseConnection
from .engine.service import WakeupEngine
from .groups.json_state_repository import JsonFileStateRepository
from .groups.memory_state_repository import InMemoryStateRepository
from .groups.mysql_state_repository import MySQLStateRepository
from .groups.repository import StateRepository
from .notifications.http_notifier import HttpPushNotifier
from .notifications.notifier import LoggingNotifier, Notifier
from .transport.profiles import HttpProfileLookup, NoProfileLookup, ProfileLookup


@dataclass(frozen=True)
class Container:
    clock: OverridableClock
    repository: StateRepository
    notifier: Notifier
    aggregator: Aggregator
    engine: WakeupEngine
    scheduler: DailySweepScheduler
    profiles: ProfileLookup
    enable_test_commands: bool = False
    webhook_secret: Optional[str] = None
    allow_unsigned_webhooks: bool = False


def build_repository(settings) -> StateRepository:
    backend = str(getattr(settings, "STATE_BACKEND", "json")).lower()
    if backend == "memory":
        return InMemoryStateRepository()
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        return MySQLStateRepository(conn)
    if backend == "json":
        return JsonFileStateRepository(getattr(settings, "STATE_FILE", DEFAULT_STATE_FILE))
    raise ValueError(f"Unknown STATE_BACKEND: {backend!r}")


def build_notifier(settings) -> Notifier:
    endpoint = getattr(settings, "PUSH_ENDPOINT", None)
    if endpoint:
        return HttpPushNotifier(endpoint, token=getattr(settings, "PUSH_TOKEN", None))
    return LoggingNotifier()


def build_profiles(settings) -> ProfileLookup:
    endpoint = getattr(settings, "PROFILE_ENDPOINT", None)
    if endpoint:
        return HttpProfileLookup(endpoint, token=getattr(settings, "PUSH_TOKEN", None))
    return NoProfileLookup()


def build_container(
    settings,
    *,
    repository: Optional[StateRepository] = None,
    notifier: Optional[Notifier] = None,
    clock: Optional[Clock] = None,
    profiles: Optional[ProfileLookup] = None,
) -> Container:
    """Wire the engine from a settings module.

    ``repository``/``notifier``/``clock``/``profiles`` overrides are used by tests and tools.
    Raises PersistenceError when the initial snapshot cannot be loaded.
    """
    repository = repository or build_repository(settings)
    notifier = notifier or build_notifier(settings)
    overridable = clock if isinstance(clock, OverridableClock) else OverridableClock(clock)

    aggregator = Aggregator(notifier)
    engine = WakeupEngine.from_repository(repository, aggregator)
    scheduler = DailySweepScheduler(
        engine,
        overridable,
        hour=int(getattr(settings, "SWEEP_HOUR", DEFAULT_SWEEP_HOUR)),
        minute=int(getattr(settings, "SWEEP_MINUTE", DEFAULT_SWEEP_MINUTE)),
    )

    return Container(
        clock=overridable,
        repository=repository,
        notifier=notifier,
        aggregator=aggregator,
        engine=engine,
        scheduler=scheduler,
        profiles=profiles or build_profiles(settings),
        enable_test_commands=bool(getattr(settings, "ENABLE_TEST_COMMANDS", False)),
        webhook_secret=getattr(settings, "WEBHOOK_SECRET", None) or None,
        allow_unsigned_webhooks=bool(getattr(settings, "ALLOW_UNSIGNED_WEBHOOKS", False)),
    )

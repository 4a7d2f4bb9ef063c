"""
Service locator.

Route handlers obtain services through ``ServiceProvider.get_service``
instead of constructing them per request.  Constructed instances are
cached by name for ``ttl`` seconds; expired entries are swept during
lookups at most once every ``check_period`` seconds.  Services are
stateless wrappers around the repository held by ``AppContext``, so
building a duplicate instance (for example when two requests race on
an empty cache) is harmless and needs no locking.

Each application owns its own provider (see ``create_app``); nothing in
this module is process-global.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from ..repositories.task_repository import TaskRepository
from .task_service import TaskService


logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_CHECK_PERIOD_SECONDS = 60


@dataclass
class AppContext:
    """Dependencies available to service factories."""

    task_repository: TaskRepository


def get_task_service(context: AppContext) -> TaskService:
    return TaskService(context.task_repository)


SERVICE_FACTORIES: Dict[str, Callable[[AppContext], Any]] = {
    "task": get_task_service,
}


class ServiceProvider:
    """Resolve service names to (cached) service instances."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        check_period: float = DEFAULT_CHECK_PERIOD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        factories: Optional[Dict[str, Callable[[AppContext], Any]]] = None,
    ) -> None:
        self.ttl = ttl
        self.check_period = check_period
        self._clock = clock
        self._factories = dict(SERVICE_FACTORIES if factories is None else factories)
        # name -> (instance, expires_at)
        self._instances: Dict[str, Tuple[Any, float]] = {}
        self._next_sweep = clock() + check_period

    def get_service(self, context: AppContext, name: str, skip_cache: bool = False) -> Any:
        """Return the service registered under ``name``.

        Parameters
        ----------
        context : AppContext
            Dependencies passed to the service factory.
        name : str
            Registered service name, e.g. ``"task"``.
        skip_cache : bool
            Build a fresh instance even if a cached one is still valid.
            The fresh instance replaces the cached one.

        Raises
        ------
        KeyError
            If no factory is registered under ``name``.
        """
        if name not in self._factories:
            raise KeyError(f"Unknown service '{name}'")

        now = self._clock()
        self._sweep(now)

        if not skip_cache:
            cached = self._instances.get(name)
            if cached is not None and cached[1] > now:
                return cached[0]

        service = self._factories[name](context)
        self._instances[name] = (service, now + self.ttl)
        logger.debug("Constructed service '%s'", name)
        return service

    def __len__(self) -> int:
        return len(self._instances)

    def _sweep(self, now: float) -> None:
        if now < self._next_sweep:
            return
        expired = [name for name, (_, expires_at) in self._instances.items() if expires_at <= now]
        for name in expired:
            del self._instances[name]
        self._next_sweep = now + self.check_period

"""Best-effort usage accounting for applied price rules.

Recording a usage never blocks or fails a quote. The composer hands rule ids
to a ``UsageDispatcher``, which runs the configured recorder in background
tasks and logs (then drops) every failure, cancellation included.
"""
import asyncio
import logging
from typing import Callable, Optional, Protocol, Set

from redis.asyncio import Redis

from transfer_pricing.core.enums import UsageBackend
from transfer_pricing.core.exceptions import UsageAccountingFailure
from transfer_pricing.core.metrics import usage_accounting_failures
from transfer_pricing.repositories.base import RuleRepository

logger = logging.getLogger(__name__)


class UsageRecorder(Protocol):
    async def record_usage(self, rule_id: str) -> None: ...


class NoopUsageRecorder:
    async def record_usage(self, rule_id: str) -> None:
        return None


class RepositoryUsageRecorder:
    """Delegates to the rule store's atomic increment."""

    def __init__(self, rule_repository: RuleRepository):
        self.rule_repository = rule_repository

    async def record_usage(self, rule_id: str) -> None:
        await self.rule_repository.increment_usage(rule_id)


class RedisUsageRecorder:

    def __init__(self, redis_factory: Callable[[], Redis], prefix: str = "rule_usage"):
        self.redis_factory = redis_factory
        self.prefix = prefix

    def key_for(self, rule_id: str) -> str:
        return f"{self.prefix}:{rule_id}"

    async def record_usage(self, rule_id: str) -> None:
        await self.redis_factory().incr(self.key_for(rule_id))


class CeleryUsageRecorder:

    async def record_usage(self, rule_id: str) -> None:
        from transfer_pricing.services.tasks import increment_rule_usage
        await asyncio.to_thread(increment_rule_usage.delay, rule_id)


class UsageDispatcher:

    def __init__(self, recorder: UsageRecorder, backend: str = "custom"):
        self.recorder = recorder
        self.backend = backend
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def dispatch(self, rule_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._report(UsageAccountingFailure(rule_id, "no running event loop"))
            return

        task = loop.create_task(self._record(rule_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _record(self, rule_id: str) -> None:
        try:
            await self.recorder.record_usage(rule_id)
        except asyncio.CancelledError:
            self._report(UsageAccountingFailure(rule_id, "cancelled"))
        except Exception as e:
            self._report(UsageAccountingFailure(rule_id, str(e)))

    def _report(self, failure: UsageAccountingFailure) -> None:
        usage_accounting_failures.labels(backend=self.backend).inc()
        logger.warning(str(failure))

    async def drain(self) -> None:
        """Wait for in-flight recordings, e.g. on shutdown."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def build_usage_recorder(
    backend: UsageBackend,
    rule_repository: Optional[RuleRepository] = None,
    redis_factory: Optional[Callable[[], Redis]] = None,
    prefix: str = "rule_usage",
) -> UsageRecorder:
    if backend == UsageBackend.DATABASE:
        if rule_repository is None:
            raise ValueError("database usage backend requires a rule repository")
        return RepositoryUsageRecorder(rule_repository)
    if backend == UsageBackend.REDIS:
        if redis_factory is None:
            raise ValueError("redis usage backend requires a redis factory")
        return RedisUsageRecorder(redis_factory, prefix)
    if backend == UsageBackend.CELERY:
        return CeleryUsageRecorder()
    return NoopUsageRecorder()

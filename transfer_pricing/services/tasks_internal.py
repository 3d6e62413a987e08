import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from transfer_pricing.core.config import settings
from transfer_pricing.repositories.sql import SqlRuleRepository

logger = logging.getLogger(__name__)


async def increment_rule_usage_async(rule_id: str, session_factory=None):
    """Background task body: atomic applied_count increment for one rule"""
    engine_worker = None
    if session_factory is None:
        engine_worker = create_async_engine(settings.DATABASE_URL, future=True, echo=False)
        session_factory = async_sessionmaker(engine_worker, class_=AsyncSession, expire_on_commit=False)

    try:
        await SqlRuleRepository(session_factory).increment_usage(rule_id)
        logger.info(f"Recorded usage for rule {rule_id}")
    finally:
        if engine_worker is not None:
            await engine_worker.dispose()

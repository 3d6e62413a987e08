from fastapi import Request

from transfer_pricing.core.config import settings
from transfer_pricing.core.redis import get_redis
from transfer_pricing.db.session import AsyncSessionLocal
from transfer_pricing.repositories.sql import SqlRouteRepository, SqlRuleRepository
from transfer_pricing.services.quotes import QuoteService
from transfer_pricing.services.usage import UsageDispatcher, build_usage_recorder


def build_quote_service(session_factory=AsyncSessionLocal) -> QuoteService:
    route_repository = SqlRouteRepository(session_factory)
    rule_repository = SqlRuleRepository(session_factory)
    recorder = build_usage_recorder(
        settings.USAGE_BACKEND,
        rule_repository=rule_repository,
        redis_factory=get_redis,
        prefix=settings.USAGE_COUNTER_PREFIX,
    )
    return QuoteService(
        route_repository,
        rule_repository,
        usage=UsageDispatcher(recorder, backend=str(settings.USAGE_BACKEND)),
    )


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service


def get_route_repository(request: Request):
    return request.app.state.quote_service.route_repository

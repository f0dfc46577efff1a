"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.scheduling.loop_scheduler import LoopScheduler
from src.platform.sse.httpx_event_source import HttpxEventSourceFactory
from src.service.seat_hold.app.seat_detail_controller import SeatDetailController
from src.service.seat_hold.app.seat_stream_client import SeatStreamClient
from src.service.seat_hold.driven_adapter.api.concert_query_repo_http_impl import (
    ConcertQueryRepoHttpImpl,
)
from src.service.seat_hold.driven_adapter.api.seat_hold_command_repo_http_impl import (
    SeatHoldCommandRepoHttpImpl,
)
from src.service.seat_hold.driven_adapter.auth.session_token_provider import SessionTokenProvider
from src.service.seat_hold.driven_adapter.cart.in_memory_cart_store import InMemoryCartStore


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Infrastructure services
    scheduler = providers.Singleton(LoopScheduler)
    token_provider = providers.Singleton(
        SessionTokenProvider, token=config_service.provided.AUTH_TOKEN
    )
    event_source_factory = providers.Singleton(
        HttpxEventSourceFactory, connect_timeout=config_service.provided.HTTP_REQUEST_TIMEOUT
    )

    # Repositories (share one httpx client each for the process lifetime)
    concert_query_repo = providers.Singleton(
        ConcertQueryRepoHttpImpl,
        base_url=config_service.provided.API_BASE_URL,
        timeout=config_service.provided.HTTP_REQUEST_TIMEOUT,
        token_provider=token_provider,
    )
    seat_hold_command_repo = providers.Singleton(
        SeatHoldCommandRepoHttpImpl,
        base_url=config_service.provided.API_BASE_URL,
        timeout=config_service.provided.HTTP_REQUEST_TIMEOUT,
        token_provider=token_provider,
    )
    cart_store = providers.Singleton(
        InMemoryCartStore, default_ttl_seconds=config_service.provided.HOLD_DEFAULT_TTL_SECONDS
    )

    # One stream client per subscription; concert_id and callbacks come from the caller
    seat_stream_client = providers.Factory(
        SeatStreamClient,
        base_url=config_service.provided.API_BASE_URL,
        event_source_factory=event_source_factory,
        scheduler=scheduler,
        token_provider=token_provider,
        base_delay=config_service.provided.SSE_RECONNECT_BASE_DELAY,
        max_delay=config_service.provided.SSE_RECONNECT_MAX_DELAY,
        max_attempts=config_service.provided.SSE_MAX_RECONNECT_ATTEMPTS,
        manual_reconnect_delay=config_service.provided.SSE_MANUAL_RECONNECT_DELAY,
    )

    seat_detail_controller = providers.Factory(
        SeatDetailController,
        concert_query_repo=concert_query_repo,
        seat_hold_command_repo=seat_hold_command_repo,
        seat_stream_client_factory=seat_stream_client.provider,
        scheduler=scheduler,
        user_id=config_service.provided.DEFAULT_USER_ID,
        cart_store=cart_store,
        hold_default_ttl_seconds=config_service.provided.HOLD_DEFAULT_TTL_SECONDS,
        hold_timer_tick_seconds=config_service.provided.HOLD_TIMER_TICK_SECONDS,
    )


container = Container()


async def cleanup() -> None:
    await container.concert_query_repo().aclose()
    await container.seat_hold_command_repo().aclose()
    await container.event_source_factory().aclose()
    container.reset_singletons()

"""Page rendering strategies over a single weather fetcher.

The four strategy pages share one fetcher and one card formatter. They differ
only in when the fetcher is called and in the ``Cache-Control`` directive sent
with the page:

- SSG: fetched once while the application starts, never again
- SSR: fetched on every request
- ISR: cached; once older than the revalidation interval the cached value is
  still served while one background refresh replaces it
- Edge: fetched on every request, labelled as running on the edge runtime
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from app.models.pages import DataCard, PageLink, RenderStrategy
from app.models.weather import UNAVAILABLE, Reading, WeatherResult
from app.utils.logging import get_logger

logger = get_logger(__name__)


class WeatherFetcher(Protocol):
    async def fetch(self) -> WeatherResult: ...


@dataclass(frozen=True)
class PagePolicy:
    """Declarative rendering policy of one strategy page."""

    strategy: RenderStrategy
    title: str
    render_type: str
    summary: str
    description: str
    cache_control: str
    # None: never refetch, 0: refetch on every request
    revalidate: float | None
    runtime: str = "server"

    @property
    def path(self) -> str:
        return f"/{self.strategy.value}"


def build_policies(isr_revalidate_seconds: int = 30) -> dict[RenderStrategy, PagePolicy]:
    """Policies of the four strategy pages."""
    return {
        RenderStrategy.SSG: PagePolicy(
            strategy=RenderStrategy.SSG,
            title="Static Site Generation (SSG)",
            render_type="Build-time",
            summary="Static Site Generation (build-time)",
            description=(
                "Pages are pre-rendered at build time and served as static content. "
                "The data is fetched once and stays the same until the next build."
            ),
            cache_control="public, max-age=31536000, immutable",
            revalidate=None,
        ),
        RenderStrategy.SSR: PagePolicy(
            strategy=RenderStrategy.SSR,
            title="Server-Side Rendering (SSR)",
            render_type="Server runtime",
            summary="Server-Side Rendering (on-demand)",
            description=(
                "Pages are rendered on demand for each request. "
                "Data is always fresh at the cost of an upstream call per request."
            ),
            cache_control="no-store",
            revalidate=0,
        ),
        RenderStrategy.ISR: PagePolicy(
            strategy=RenderStrategy.ISR,
            title="Incremental Static Regeneration (ISR)",
            render_type=f"Cached ({isr_revalidate_seconds}s)",
            summary="Incremental Static Regeneration (revalidate)",
            description=(
                "Pages are served from cache and regenerated in the background once the "
                "revalidation interval has passed. The first visitor after expiry still sees stale data."
            ),
            cache_control=f"s-maxage={isr_revalidate_seconds}, stale-while-revalidate",
            revalidate=isr_revalidate_seconds,
        ),
        RenderStrategy.EDGE: PagePolicy(
            strategy=RenderStrategy.EDGE,
            title="Edge Rendering",
            render_type="Edge Function",
            summary="Edge Function Rendering (low latency)",
            description=(
                "Pages are rendered per request on edge nodes close to the user, "
                "trading a limited runtime for low latency."
            ),
            cache_control="no-store",
            revalidate=0,
            runtime="edge",
        ),
    }


def _format_reading(value: Reading, unit: str) -> str:
    if value == UNAVAILABLE:
        return UNAVAILABLE
    return f"{value:g}{unit}"


def format_card(result: WeatherResult, policy: PagePolicy) -> DataCard:
    """Format a fetch result for a strategy page."""
    snapshot = result.to_snapshot()
    return DataCard(
        title=policy.title,
        render_type=policy.render_type,
        strategy=policy.strategy,
        description=policy.description,
        location=snapshot.location,
        temperature=_format_reading(snapshot.temperature, "°C"),
        wind_speed=_format_reading(snapshot.wind_speed, " km/h"),
        rendered_at=snapshot.time,
        available=result.ok,
        unavailable_reason=None if result.ok else result.reason,
    )


class RevalidatingCache:
    """Holds one fetch result and refreshes it per a revalidation interval.

    With ``revalidate=None`` the first result is kept forever. Otherwise a
    value older than ``revalidate`` seconds is still returned, and a single
    background refresh is started to replace it.
    """

    def __init__(
        self,
        loader: Callable[[], Awaitable[WeatherResult]],
        revalidate: float | None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.revalidate = revalidate
        self._clock = clock
        self._value: WeatherResult | None = None
        self._loaded_at = 0.0
        self._lock = asyncio.Lock()
        self.refresh_task: asyncio.Task[None] | None = None

    @property
    def is_stale(self) -> bool:
        if self._value is None:
            return True
        if self.revalidate is None:
            return False
        return self._clock() - self._loaded_at >= self.revalidate

    async def get(self) -> WeatherResult:
        if self._value is None:
            async with self._lock:
                if self._value is None:
                    await self._load()
            return self._value

        if self.is_stale and (self.refresh_task is None or self.refresh_task.done()):
            logger.info("Cached page is stale, regenerating in the background")
            self.refresh_task = asyncio.create_task(self._load())

        return self._value

    async def _load(self) -> None:
        self._value = await self._loader()
        self._loaded_at = self._clock()

    async def cancel_refresh(self) -> None:
        """Cancel and wait out a background refresh that is still running."""
        task = self.refresh_task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


class PageRenderer:
    """Renders the strategy pages from one weather fetcher."""

    def __init__(
        self,
        fetcher: WeatherFetcher,
        policies: dict[RenderStrategy, PagePolicy] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.fetcher = fetcher
        self.policies = policies or build_policies()
        self._caches = {
            strategy: RevalidatingCache(self.fetcher.fetch, policy.revalidate, clock)
            for strategy, policy in self.policies.items()
            if policy.revalidate != 0
        }

    def cache_for(self, strategy: RenderStrategy) -> RevalidatingCache | None:
        return self._caches.get(strategy)

    async def prerender(self) -> None:
        """Fill the build-time pages."""
        for strategy, policy in self.policies.items():
            if policy.revalidate is None:
                logger.info(f"Pre-rendering {policy.path}")
                await self._caches[strategy].get()

    async def aclose(self) -> None:
        """Stop pending regenerations before the fetcher's HTTP client goes away."""
        for cache in self._caches.values():
            await cache.cancel_refresh()

    async def render(self, strategy: RenderStrategy) -> DataCard:
        policy = self.policies[strategy]
        cache = self._caches.get(strategy)
        result = await cache.get() if cache else await self.fetcher.fetch()
        return format_card(result, policy)

    def index(self) -> list[PageLink]:
        return [
            PageLink(name=policy.strategy.name, path=policy.path, description=policy.summary)
            for policy in self.policies.values()
        ]

"""Generation engine: caching, retry and timeout around generator closures."""

import asyncio
import dataclasses
import inspect
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Sequence, TypeVar

import structlog

from . import helpers
from .cache import CacheStats, GenerationCache
from .exceptions import ConfigError, GenerationFailure, GenerationTimeout
from .rng import SeededRandom

logger = structlog.get_logger()

T = TypeVar("T")

ProgressCallback = Callable[[float, str], None]
ErrorCallback = Callable[[BaseException, str], None]
GeneratorFn = Callable[["GenerationContext"], "T | Awaitable[T]"]

# Seeds drawn when none is given fall in [0, MAX_RANDOM_SEED)
MAX_RANDOM_SEED = 1_000_000


@dataclass
class GenerationOptions:
    """Per-engine generation policy."""

    seed: int | None = None
    use_cache: bool = True
    max_retries: int = 3
    timeout_ms: float | None = 30_000
    retry_base_delay_ms: float = 100
    progress_callback: ProgressCallback | None = None
    error_callback: ErrorCallback | None = None


@dataclass
class GenerationStats:
    """Running statistics for an engine."""

    total_time_ms: float = 0.0
    iterations_count: int = 0
    success_rate: float = 0.0
    failure_reasons: list[str] = field(default_factory=list)
    memory_usage: int = 0
    cache_hits: int = 0
    cache_misses: int = 0


@dataclass
class GenerationContext:
    """Seed, RNG, cache, stats and options handed to every generator call."""

    seed: int
    rng: SeededRandom
    cache: GenerationCache
    stats: GenerationStats
    options: GenerationOptions
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        seed: int,
        options: GenerationOptions | None = None,
        cache: GenerationCache | None = None,
    ) -> "GenerationContext":
        return cls(
            seed=seed,
            rng=SeededRandom(seed),
            cache=cache if cache is not None else GenerationCache(),
            stats=GenerationStats(),
            options=options or GenerationOptions(seed=seed),
        )

    def child(self, seed: int | None = None) -> "GenerationContext":
        """Derive a context with a new seed and an independent cache.

        Args:
            seed: Seed for the child; drawn from this context's RNG if omitted.
        """
        child_seed = seed if seed is not None else self.rng.spawn_seed()
        return GenerationContext(
            seed=child_seed,
            rng=SeededRandom(child_seed),
            cache=GenerationCache(
                max_entries=self.cache.max_entries,
                max_memory_bytes=self.cache.max_memory_bytes,
                ttl_seconds=self.cache.ttl_seconds,
                clock=self.cache.clock,
            ),
            stats=GenerationStats(),
            options=dataclasses.replace(self.options, seed=child_seed),
            metadata=dict(self.metadata),
        )

    def report_progress(self, fraction: float, stage: str) -> None:
        """Forward progress to the configured callback, if any."""
        if self.options.progress_callback is not None:
            self.options.progress_callback(fraction, stage)


def _discard_result(task: asyncio.Future) -> None:
    # Retrieve the outcome so abandoned tasks never log "exception never retrieved"
    if not task.cancelled():
        task.exception()


class GenerationEngine:
    """Runs generator closures with caching, retry and timeout.

    Usage:
        engine = GenerationEngine(GenerationOptions(seed=42))
        maze = await engine.generate("maze", lambda ctx: MazeGenerator(cfg).generate(ctx))
    """

    def __init__(
        self,
        options: GenerationOptions | None = None,
        cache: GenerationCache | None = None,
    ):
        options = options or GenerationOptions()
        seed = options.seed
        if seed is None:
            seed = secrets.randbelow(MAX_RANDOM_SEED)
        self._context = GenerationContext.create(
            seed, dataclasses.replace(options, seed=seed), cache
        )
        self._in_flight = 0
        self._failed_generations = 0
        self._queue_lock = asyncio.Lock()
        self._queue_length = 0

    # Properties

    @property
    def seed(self) -> int:
        return self._context.seed

    @property
    def context(self) -> GenerationContext:
        return self._context

    @property
    def options(self) -> GenerationOptions:
        return self._context.options

    @property
    def stats(self) -> GenerationStats:
        """Copy of the running statistics."""
        stats = self._context.stats
        return dataclasses.replace(stats, failure_reasons=list(stats.failure_reasons))

    @property
    def is_generating(self) -> bool:
        return self._in_flight > 0

    @property
    def queue_length(self) -> int:
        """Queued generations, including the one currently running."""
        return self._queue_length

    def set_seed(self, seed: int) -> None:
        """Reseed the engine; cached results for the old seed are dropped."""
        self._context.seed = seed
        self._context.rng = SeededRandom(seed)
        self._context.options.seed = seed
        self.clear_cache()
        logger.info("generation_reseeded", seed=seed)

    # Generation

    async def generate(
        self, key: str, generator: GeneratorFn, use_cache: bool = True
    ) -> Any:
        """Run a generator, serving from and filling the cache.

        Args:
            key: Logical name of the result; combined with the seed for caching.
            generator: Callable taking the context and returning a value or
                an awaitable.
            use_cache: Set False to bypass the cache for this call.

        Returns:
            The generated (or cached) value.

        Raises:
            ConfigError: Raised by the generator; never retried.
            GenerationTimeout: The last attempt exceeded ``timeout_ms``.
            GenerationFailure: Every attempt raised.
        """
        ctx = self._context
        options = ctx.options
        cache_key = f"{key}_{ctx.seed}"
        caching = use_cache and options.use_cache
        start = time.perf_counter()

        if caching:
            entry = ctx.cache.get(cache_key)
            if entry is not None:
                ctx.stats.cache_hits += 1
                logger.debug("cache_hit", key=cache_key)
                return entry.value
            ctx.stats.cache_misses += 1
            logger.debug("cache_miss", key=cache_key)

        self._in_flight += 1
        logger.info("generation_started", key=key, seed=ctx.seed)
        try:
            result, attempts = await self._run_with_retries(key, generator)
        finally:
            self._in_flight -= 1

        duration_ms = (time.perf_counter() - start) * 1000

        if caching:
            ctx.cache.put(cache_key, result)
            ctx.stats.memory_usage = ctx.cache.memory_usage()

        ctx.stats.total_time_ms += duration_ms
        ctx.stats.iterations_count += 1
        self._update_success_rate()

        logger.info(
            "generation_completed",
            key=key,
            duration_ms=round(duration_ms, 2),
            attempts=attempts,
            cache_used=caching,
        )
        return result

    async def _run_with_retries(self, key: str, generator: GeneratorFn) -> tuple[Any, int]:
        options = self._context.options
        total = 1 + max(0, options.max_retries)
        reasons: list[str] = []
        attempts = 0

        while True:
            try:
                return await self._invoke(key, generator), attempts + 1
            except Exception as exc:
                attempts += 1
                reason = str(exc) or type(exc).__name__
                reasons.append(reason)
                self._context.stats.failure_reasons.append(reason)

                if isinstance(exc, ConfigError) or attempts >= total:
                    self._failed_generations += 1
                    self._update_success_rate()
                    logger.warning(
                        "generation_failed", key=key, error=reason, attempts=attempts
                    )
                    if isinstance(exc, (ConfigError, GenerationTimeout)):
                        raise
                    raise GenerationFailure(key, attempts, reasons) from exc

                if options.error_callback is not None:
                    options.error_callback(exc, f"Attempt {attempts}/{total}")

                delay_ms = 2**attempts * options.retry_base_delay_ms
                logger.info(
                    "generation_retry",
                    key=key,
                    attempt=attempts,
                    delay_ms=delay_ms,
                    error=reason,
                )
                await asyncio.sleep(delay_ms / 1000)

    async def _invoke(self, key: str, generator: GeneratorFn) -> Any:
        result = generator(self._context)
        if not inspect.isawaitable(result):
            return result

        timeout_ms = self._context.options.timeout_ms
        if not timeout_ms:
            return await result

        task = asyncio.ensure_future(result)
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
        if task not in done:
            # Abandoned, not cancelled; whatever it produces is dropped
            task.add_done_callback(_discard_result)
            raise GenerationTimeout(key, timeout_ms)
        return task.result()

    async def generate_batch(
        self,
        items: Sequence[tuple[str, GeneratorFn]],
        parallel: bool = True,
    ) -> dict[str, Any]:
        """Run several generators.

        Args:
            items: (key, generator) pairs.
            parallel: Run all concurrently when True, else strictly in order.

        Returns:
            Results by key, in declaration order.
        """
        if parallel:
            values = await asyncio.gather(
                *(self.generate(key, generator) for key, generator in items)
            )
            return {key: value for (key, _), value in zip(items, values)}

        results: dict[str, Any] = {}
        for key, generator in items:
            results[key] = await self.generate(key, generator)
        return results

    async def queue_generation(self, key: str, generator: GeneratorFn) -> Any:
        """Run a generator after every previously queued one has finished."""
        self._queue_length += 1
        try:
            async with self._queue_lock:
                return await self.generate(key, generator)
        finally:
            self._queue_length -= 1

    def _update_success_rate(self) -> None:
        stats = self._context.stats
        total = stats.iterations_count + self._failed_generations
        stats.success_rate = stats.iterations_count / total if total else 0.0

    # Cache and metadata

    def cache_stats(self) -> CacheStats:
        stats = self._context.stats
        requests = stats.cache_hits + stats.cache_misses
        return CacheStats(
            size=len(self._context.cache),
            memory_usage=self._context.cache.memory_usage(),
            hit_rate=stats.cache_hits / requests if requests else 0.0,
        )

    def clear_cache(self) -> None:
        self._context.cache.clear()
        self._context.stats.cache_hits = 0
        self._context.stats.cache_misses = 0
        self._context.stats.memory_usage = 0

    def set_metadata(self, key: str, value: Any) -> None:
        self._context.metadata[key] = value

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self._context.metadata.get(key, default)

    def child(self, seed: int | None = None, **overrides: Any) -> "GenerationEngine":
        """Engine with inherited options, a new seed and its own cache."""
        child_seed = seed if seed is not None else self._context.rng.spawn_seed()
        options = dataclasses.replace(self._context.options, **overrides, seed=child_seed)
        cache = self._context.cache
        return GenerationEngine(
            options,
            GenerationCache(
                max_entries=cache.max_entries,
                max_memory_bytes=cache.max_memory_bytes,
                ttl_seconds=cache.ttl_seconds,
                clock=cache.clock,
            ),
        )

    def dispose(self) -> None:
        self.clear_cache()
        self._context.metadata.clear()
        self._in_flight = 0

    # Random and numeric helpers

    def random_float(self, low: float = 0.0, high: float = 1.0) -> float:
        return self._context.rng.uniform(low, high)

    def random_int(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        return self._context.rng.randint(low, high)

    def random_choice(self, items: Sequence[T]) -> T:
        return self._context.rng.choice(items)

    def random_choices(
        self, items: Sequence[T], count: int, allow_duplicates: bool = False
    ) -> list[T]:
        return self._context.rng.choices(items, count, allow_duplicates)

    def weighted_choice(self, items: Sequence[tuple[T, float]]) -> T:
        return self._context.rng.weighted_choice(items)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        return self._context.rng.shuffle(items)

    def normal(self, mean: float = 0.0, std_dev: float = 1.0) -> float:
        return self._context.rng.normal(mean, std_dev)

    @staticmethod
    def lerp(a: float, b: float, t: float) -> float:
        return helpers.lerp(a, b, t)

    @staticmethod
    def smoothstep(edge0: float, edge1: float, x: float) -> float:
        return helpers.smoothstep(edge0, edge1, x)

    @staticmethod
    def clamp(value: float, min_value: float, max_value: float) -> float:
        return helpers.clamp(value, min_value, max_value)

    @staticmethod
    def map_range(
        value: float, in_min: float, in_max: float, out_min: float, out_max: float
    ) -> float:
        return helpers.map_range(value, in_min, in_max, out_min, out_max)

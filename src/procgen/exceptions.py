"""Custom exceptions for procedural generation."""


class ProcgenError(Exception):
    """Base exception for generation errors."""

    pass


class ConfigError(ProcgenError, ValueError):
    """Raised when a generator configuration is malformed.

    Never retried by the engine.
    """

    pass


class GenerationTimeout(ProcgenError, TimeoutError):
    """Raised when a generator does not settle before the timeout."""

    def __init__(self, key: str, timeout_ms: float):
        super().__init__(f"Generation timeout: '{key}' exceeded {timeout_ms:g}ms")
        self.key = key
        self.timeout_ms = timeout_ms


class GenerationFailure(ProcgenError):
    """Raised when a generator keeps failing after all retries."""

    def __init__(self, key: str, attempts: int, reasons: list[str]):
        last = reasons[-1] if reasons else "unknown error"
        super().__init__(
            f"Generation of '{key}' failed after {attempts} attempts: {last}"
        )
        self.key = key
        self.attempts = attempts
        self.reasons = list(reasons)


class CacheConsistencyError(ProcgenError):
    """Raised when the generation cache bookkeeping is corrupted."""

    pass


class InvalidCoordinateError(ProcgenError, IndexError):
    """Raised when a grid coordinate is out of bounds."""

    pass

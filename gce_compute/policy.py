"""Refresh policy deciding when a cached compute client may be reused."""

from dataclasses import dataclass

# Safety margin so a handle is never reused right at its token's expiry
EXPIRY_MARGIN_SECONDS = 1


@dataclass(frozen=True)
class RefreshPolicy:
    """How long a cached client stays valid.

    ``interval`` is in seconds:

    * ``None``: unset, nothing has been refreshed yet
    * ``0``: disabled, refresh on every access
    * negative: cache forever once refreshed
    * positive: reuse until ``interval`` seconds after the last refresh
    """

    interval: float | None = None

    @classmethod
    def unset(cls) -> "RefreshPolicy":
        return cls(None)

    @classmethod
    def disabled(cls) -> "RefreshPolicy":
        return cls(0)

    @classmethod
    def cache_forever(cls) -> "RefreshPolicy":
        return cls(-1)

    @classmethod
    def expires_after(cls, seconds: float) -> "RefreshPolicy":
        if seconds <= 0:
            raise ValueError(f"expiry interval must be positive, got {seconds}")
        return cls(seconds)

    @classmethod
    def from_ttl(cls, ttl: float | None) -> "RefreshPolicy":
        """Derive the policy from a freshly issued token's lifetime."""
        if ttl is None:
            return cls.cache_forever()
        remaining = ttl - EXPIRY_MARGIN_SECONDS
        if remaining <= 0:
            return cls.disabled()
        return cls.expires_after(remaining)

    @property
    def is_unset(self) -> bool:
        return self.interval is None

    @property
    def is_disabled(self) -> bool:
        return self.interval == 0

    @property
    def caches_forever(self) -> bool:
        return self.interval is not None and self.interval < 0

    def admits(self, issued_at: float | None, now: float) -> bool:
        """Return True if an entry issued at ``issued_at`` may still be used.

        ``issued_at`` is None when nothing is cached.
        """
        if issued_at is None or self.interval is None or self.interval == 0:
            return False
        if self.interval < 0:
            return True
        return (now - issued_at) < self.interval

    def __str__(self) -> str:
        if self.is_unset:
            return "unset"
        if self.is_disabled:
            return "disabled"
        if self.caches_forever:
            return "cache-forever"
        return f"expires-after {self.interval:g}s"

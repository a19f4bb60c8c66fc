"""
Dependency health checks for /api/health/detailed.

A check is an async function decorated with ``health_check_with_timeout``;
calling it never raises and yields a ``HealthCheckResult``.
"""

from __future__ import annotations

import asyncio
import functools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from shared.config.logging import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class HealthCheckResult:
    component: str
    status: HealthStatus
    latency_ms: float
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "status": self.status.value,
            "component": self.component,
            "latency_ms": round(self.latency_ms, 2),
        }
        if self.error:
            body["error"] = self.error
        if self.details:
            body["details"] = self.details
        return body


def health_check_with_timeout(timeout: float = 5.0, component: str = "unknown"):
    def decorator(check: Callable[..., Awaitable[dict[str, Any] | None]]):
        @functools.wraps(check)
        async def run(*args: Any, **kwargs: Any) -> HealthCheckResult:
            started = time.perf_counter()
            error: str | None = None
            details: dict[str, Any] | None = None
            try:
                details = await asyncio.wait_for(check(*args, **kwargs), timeout=timeout)
            except asyncio.TimeoutError:
                error = f"timeout after {timeout}s"
            except Exception as exc:
                error = str(exc)

            elapsed = (time.perf_counter() - started) * 1000
            if error is not None:
                logger.warning("Health check failed", component=component, error=error)
                return HealthCheckResult(component, HealthStatus.UNHEALTHY, elapsed, error=error)
            return HealthCheckResult(component, HealthStatus.HEALTHY, elapsed, details=details or {})

        return run

    return decorator


async def aggregate_health_checks(checks: list[Awaitable[HealthCheckResult]]) -> dict[str, Any]:
    """Run checks concurrently; any unhealthy component degrades the whole."""
    results: list[HealthCheckResult] = await asyncio.gather(*checks)
    overall = HealthStatus.HEALTHY if all(r.healthy for r in results) else HealthStatus.DEGRADED
    return {
        "status": overall.value,
        "components": {r.component: r.to_dict() for r in results},
    }

"""
Remote service connection checks.

Four checks run in order: configuration present, database reachable,
auth service answering, and read access to the core tables. Each check
reports independently; one failing check does not stop the others.
"""

import asyncio
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional

from core.infrastructure.container import ServiceContainer

CHECKED_TABLES = ("categories", "brands", "products", "customers", "orders")


@dataclass
class CheckResult:
    name: str
    status: str  # "success" or "error"
    message: str

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _mask(value: Optional[str], keep: int) -> str:
    if not value:
        return ""
    return value[:keep] + "..."


async def run_connection_checks(
    container: ServiceContainer,
    config: Mapping[str, Any],
    access_token: Optional[str] = None,
) -> List[CheckResult]:
    """
    Run every connection check.

    Args:
        container: Service container under test
        config: ``STOREFRONT`` settings mapping
        access_token: Optional token to resolve in the auth check

    Returns:
        One CheckResult per check, in order
    """
    results = []

    if (config.get("BACKEND") or "supabase").lower() == "memory":
        results.append(CheckResult("Environment Variables", "success", "In-memory backend"))
    elif config.get("SUPABASE_URL") and config.get("SUPABASE_KEY"):
        results.append(
            CheckResult(
                "Environment Variables",
                "success",
                f"URL: {_mask(config['SUPABASE_URL'], 30)} | Key: {_mask(config['SUPABASE_KEY'], 6)}",
            )
        )
    else:
        results.append(
            CheckResult("Environment Variables", "error", "Missing SUPABASE_URL or SUPABASE_KEY")
        )

    try:
        await container.remote.ping("categories")
        results.append(
            CheckResult("Database Connection", "success", "Successfully connected to database")
        )
    except Exception as e:  # pylint: disable=broad-exception-caught
        results.append(CheckResult("Database Connection", "error", f"Connection failed: {e}"))

    try:
        actor = await container.sessions.get_current_actor(access_token)
        message = (
            f"Authenticated as: {actor.email}" if actor else "Auth service available (not logged in)"
        )
        results.append(CheckResult("Authentication", "success", message))
    except Exception as e:  # pylint: disable=broad-exception-caught
        results.append(CheckResult("Authentication", "error", f"Auth test failed: {e}"))

    outcomes = await asyncio.gather(
        *(container.remote.ping(table) for table in CHECKED_TABLES), return_exceptions=True
    )
    failed = [table for table, outcome in zip(CHECKED_TABLES, outcomes) if outcome is not None]
    accessible = len(CHECKED_TABLES) - len(failed)
    if not failed:
        results.append(
            CheckResult("Table Access", "success", f"All {len(CHECKED_TABLES)} tables accessible")
        )
    else:
        results.append(
            CheckResult(
                "Table Access",
                "error",
                f"{accessible}/{len(CHECKED_TABLES)} tables accessible, {len(failed)} failed "
                f"({', '.join(failed)})",
            )
        )

    return results

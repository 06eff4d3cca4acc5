"""Availability check for the depot the install scenario downloads from."""

import logging

import aiohttp
from yarl import URL

log = logging.getLogger(__name__)


class DepotUnavailableError(Exception):
    """Raised when the depot does not report itself healthy."""


async def check_depot_status(depot_url: str, timeout: float = 10.0) -> bool:
    """Check the depot's status endpoint.

    The builder API answers ``GET /status`` with 200 when healthy; any other
    status is an outage or a partial outage.

    Args:
        depot_url: Base URL of the depot API (e.g., "http://localhost:9636/v1")
        timeout: Total request timeout in seconds

    Returns:
        True if the depot answered 200, False otherwise

    """
    status_url = URL(depot_url) / "status"
    client_timeout = aiohttp.ClientTimeout(total=timeout)

    try:
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(status_url) as response:
                if response.status != 200:
                    log.warning(
                        "Depot status check failed: url=%s status=%d",
                        status_url,
                        response.status,
                    )
                    return False
    except (aiohttp.ClientError, TimeoutError) as exc:
        log.warning("Depot unreachable: url=%s error=%s", status_url, exc)
        return False

    log.info("Depot is up: %s", status_url)
    return True

"""
HTTP client helper with standardized timeout configuration.

Every outbound call (Resend today) goes through here so a slow provider
cannot hold an intake request open indefinitely.
"""

import httpx


def get_httpx_timeout() -> httpx.Timeout:
    """
    Get standardized timeout configuration for outbound HTTP calls.

    Returns:
        httpx.Timeout (10s overall, 5s connect/write/pool)
    """
    return httpx.Timeout(
        10.0,
        connect=5.0,
        read=10.0,
        write=5.0,
        pool=5.0,
    )


def create_httpx_client(
    base_url: str = "",
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Create an httpx.AsyncClient with standardized timeouts.

    Args:
        base_url: Optional base URL for relative request paths
        headers: Default headers (e.g. Authorization)
        transport: Optional transport override (tests use httpx.MockTransport)

    Returns:
        httpx.AsyncClient configured with appropriate timeouts
    """
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        timeout=get_httpx_timeout(),
        transport=transport,
    )

"""Credentialed request forwarding to the hosted inference API."""

import logging
from typing import Any

import httpx

from extension_relay.core.config import RelayConfig
from extension_relay.core.exceptions import UpstreamTimeoutError, UpstreamUnreachableError

logger = logging.getLogger(__name__)


def build_timeout(config: RelayConfig) -> httpx.Timeout:
    """Translate the optional relay timeouts into an httpx timeout (None disables a limit)."""
    connect = config.connect_timeout_s if config.connect_timeout_s is not None else config.timeout_s
    return httpx.Timeout(config.timeout_s, connect=connect)


def auth_headers(config: RelayConfig) -> dict[str, str]:
    """Headers for an upstream call, carrying the server-held bearer credential."""
    return {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
    }


async def forward_inference(
    request_body: dict[str, Any],
    url: str,
    config: RelayConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Response:
    """
    POST a JSON body to the inference API with the relay credential.

    Used for question requests (inference or chat style) and for
    transcription requests alike; the caller chooses the URL and body.

    Args:
        request_body: The JSON body to send upstream
        url: Full upstream endpoint URL
        config: Relay configuration for the credential and timeouts
        transport: Optional httpx transport (defaults to the network)

    Returns:
        httpx.Response object from upstream, whatever its status code

    Raises:
        UpstreamUnreachableError: If the connection fails or the exchange breaks off
        UpstreamTimeoutError: If a configured upstream timeout expires
    """
    try:
        async with httpx.AsyncClient(timeout=build_timeout(config), transport=transport) as client:
            logger.debug(f"Forwarding request to {url}")
            response = await client.post(
                url,
                json=request_body,
                headers=auth_headers(config),
            )
            return response

    except httpx.TimeoutException as e:
        logger.error(f"Timeout error to upstream {url}: {e}")
        raise UpstreamTimeoutError(
            "Inference API did not respond in time",
            upstream=url,
        ) from e

    except httpx.TransportError as e:
        logger.error(f"Connection error to upstream {url}: {e}")
        raise UpstreamUnreachableError(
            f"Connection to upstream failed: {str(e)}",
            upstream=url,
        ) from e


def read_error_body(response: httpx.Response) -> str:
    """Best-effort read of a failed upstream body; unreadable bodies become an empty string."""
    try:
        return response.text
    except (httpx.StreamError, UnicodeDecodeError, LookupError) as e:
        logger.debug(f"Could not read upstream error body: {e}")
        return ""

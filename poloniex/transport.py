"""
Transport Invoker

Sends built requests through a requests.Session and decodes the JSON body.
Network failures are raised as-is; there is no retry or backoff.
"""

import logging
from typing import Any, Optional

import requests

from .base import APIError, UnexpectedResponseError
from .request import ApiRequest

logger = logging.getLogger(__name__)


def send(session: requests.Session, request: ApiRequest, timeout: Optional[float] = None) -> Any:
    """
    Send a request and return its decoded JSON payload.

    Args:
        session: HTTP session used for the roundtrip
        request: Request built by RequestBuilder
        timeout: Passed to the session unchanged (None keeps the transport default)

    Returns:
        Decoded JSON value

    Raises:
        requests.RequestException: Network failure or non-2xx status without error envelope
        APIError: Poloniex answered with an {"error": "..."} object
        UnexpectedResponseError: Body is not JSON
    """
    logger.debug(f"{request.method} {request.url} command={request.command}")

    try:
        response = session.request(
            request.method,
            request.url,
            params=request.params or None,
            data=request.body,
            headers=request.headers or None,
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.warning(f"Unable to process {request.command} request: {e}")
        raise

    return decode_response(response, request.command)


def decode_response(response: requests.Response, command: str = "") -> Any:
    """Decode a response body, surfacing the Poloniex error envelope."""
    try:
        payload = response.json()
    except ValueError as e:
        logger.error(f"Undecodable {command} response (HTTP {response.status_code}): {e}")
        if response.status_code >= 400:
            response.raise_for_status()
        raise UnexpectedResponseError(
            f"unexpected response shape for {command}: body is not JSON"
        ) from e

    message = error_message(payload)
    if message is not None:
        logger.error(f"Poloniex returned an error for {command}: {message}")
        raise APIError(message, status_code=response.status_code)

    if response.status_code >= 400:
        response.raise_for_status()

    return payload


def error_message(payload: Any) -> Optional[str]:
    """Return the message of an {"error": "..."} envelope, or None."""
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return None

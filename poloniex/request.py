"""
Request Builder for the Poloniex API

Public commands are sent as GET requests with the command in the query
string. Trading commands are sent as signed POST requests carrying a
strictly increasing nonce.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from .base import URL
from .signer import sign

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiRequest:
    """A request ready to be sent by the transport."""
    command: str
    method: str
    url: str
    params: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


class NonceGenerator:
    """
    Thread-safe source of strictly increasing nonces.

    Nonces follow the wall clock in nanoseconds. When the clock does not
    move forward between two calls, the previous nonce plus one is issued.
    """

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            nonce = self._clock()
            if nonce <= self._last:
                nonce = self._last + 1
            self._last = nonce
            return nonce


def _stringify(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not params:
        return {}
    return {str(k): str(v) for k, v in params.items()}


class RequestBuilder:
    """
    Builds public and trading requests.

    Args:
        api_key: API key sent in the Key header of trading requests
        api_secret: Secret used to sign trading requests
        base_url: Poloniex root URL
        nonces: Nonce source shared by every trading request of a client
    """

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        base_url: str = URL,
        nonces: Optional[NonceGenerator] = None,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.nonces = nonces or NonceGenerator()

    @property
    def public_url(self) -> str:
        return self.base_url + "/public"

    @property
    def trade_url(self) -> str:
        return self.base_url + "/tradingApi"

    def public(self, command: str, params: Optional[Mapping[str, Any]] = None) -> ApiRequest:
        """Build a GET request for a public command."""
        query = {"command": command}
        query.update(_stringify(params))

        return ApiRequest(command=command, method="GET", url=self.public_url, params=query)

    def trade(self, command: str, params: Optional[Mapping[str, Any]] = None) -> ApiRequest:
        """Build a signed POST request for a trading command."""
        form = {"command": command, "nonce": str(self.nonces.next())}
        form.update(_stringify(params))

        body = urlencode(sorted(form.items()))
        signature = sign(self.api_secret, body)

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
            "Key": self.api_key,
            "Sign": signature,
        }
        logger.debug(f"Signed {command} request with nonce {form['nonce']}")

        return ApiRequest(
            command=command, method="POST", url=self.trade_url, body=body, headers=headers
        )

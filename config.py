"""
Configuration for the Poloniex API client

Credentials are read from the environment so they never live in code.
"""
import os
from dataclasses import dataclass
from typing import Optional

from poloniex.base import URL


@dataclass
class ClientConfig:
    # Credentials - leave empty for public calls only
    api_key: str = ""
    api_secret: str = ""

    # Endpoint root, /public and /tradingApi are appended
    base_url: str = URL

    # Seconds, None keeps the requests default
    timeout: Optional[float] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        timeout = os.getenv("POLONIEX_TIMEOUT")
        return cls(
            api_key=os.getenv("POLONIEX_API_KEY", ""),
            api_secret=os.getenv("POLONIEX_API_SECRET", ""),
            base_url=os.getenv("POLONIEX_BASE_URL", URL),
            timeout=float(timeout) if timeout else None,
        )


# Default configuration
DEFAULT_CONFIG = ClientConfig()

"""
Request signing for the Poloniex trading API.
"""

import hashlib
import hmac


def sign(secret: str, body: str) -> str:
    """
    Sign a request body with HMAC-SHA512.

    Args:
        secret: API secret used as the HMAC key
        body: Exact form-encoded body sent with the request

    Returns:
        Lowercase hex digest
    """
    mac = hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha512)
    return mac.hexdigest()

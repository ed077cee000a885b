from __future__ import annotations

from collections.abc import Mapping

REDACTED = "***REDACTED***"


_SENSITIVE_HEADER_NAMES = {
    "authorization",
    "proxy-authorization",
    "x-api-key",
    "api-key",
    "cookie",
    "set-cookie",
}


def sanitize_headers_for_log(
    headers: Mapping[str, str], *, mask_token: str = REDACTED
) -> dict[str, str]:
    """
    Mask credential-bearing headers before they are written to the log.

    Headers whose name contains key/token/secret/auth/cookie are masked as
    well; everything else is kept verbatim.
    """
    sanitized: dict[str, str] = {}
    for name, value in headers.items():
        lower_name = name.lower()
        if lower_name in _SENSITIVE_HEADER_NAMES or any(
            token in lower_name for token in ("key", "token", "secret", "auth", "cookie")
        ):
            sanitized[name] = mask_token
            continue
        sanitized[name] = value
    return sanitized


__all__ = ["REDACTED", "sanitize_headers_for_log"]

"""Extension activation through the X-A2A-Extensions header."""

from collections.abc import Iterable, Mapping
from typing import List, Optional

from a2a_opt.extension.constants import A2A_EXTENSIONS_HEADER, OPT_EXTENSION_URI


def _header_value(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    wanted = name.lower()
    for key, candidate in headers.items():
        if isinstance(key, str) and key.lower() == wanted:
            return candidate
    return None


def parse_extensions_header(value: Optional[str]) -> List[str]:
    """Split a comma separated header value into extension URIs."""
    if not value:
        return []
    return [uri.strip() for uri in value.split(",") if uri.strip()]


def build_extensions_header(uris: Iterable[str]) -> str:
    return ", ".join(uris)


def is_opt_activated(headers: Optional[Mapping[str, str]]) -> bool:
    """Check whether request headers activate the OPT extension.

    The header name is matched case-insensitively, so plain dicts as well as
    case-insensitive header containers (starlette, httpx) are accepted.
    """
    if not headers:
        return False
    value = _header_value(headers, A2A_EXTENSIONS_HEADER)
    return OPT_EXTENSION_URI in parse_extensions_header(value)

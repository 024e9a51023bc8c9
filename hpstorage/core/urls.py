"""URL helpers for container and object paths."""

from typing import Optional
from urllib.parse import quote


def escape(value) -> str:
    """
    Percent-encode a path segment.

    Only letters, digits, underscore, dot and hyphen are left alone. Unlike
    urllib's default, "/" and "~" are encoded too.
    """
    return quote(str(value), safe="").replace("~", "%7E")


def public_url(
    base_url: str,
    container: Optional[str] = None,
    obj: Optional[str] = None,
) -> Optional[str]:
    """Public URL of a container or object, or None without a container."""
    if container is None:
        return None
    if obj is None:
        return f"{base_url}/{escape(container)}"
    return f"{base_url}/{escape(container)}/{escape(obj)}"

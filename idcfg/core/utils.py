"""Shared helpers: realm paths, base64 and line-array codecs, JSON traversal."""
from __future__ import annotations
import base64
import copy
import getpass
import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional
from urllib.parse import urlparse

import idcfg

EMPTY_SCRIPT_SENTINEL = "[Empty]"

_COLLISION_PATTERN = re.compile(r"(.* - imported) \(([0-9]+)\)")


# ─────────────────────────────────────────────────────────────────────────────
# Realm and URL helpers
# ─────────────────────────────────────────────────────────────────────────────
def get_realm_path(realm: str) -> str:
    """Return a CREST realm path, e.g. '/alpha' -> '/realms/root/realms/alpha'."""
    elements = ["root"] + [element for element in realm.strip("/").split("/") if element]
    return "/realms/" + "/realms/".join(elements)


def get_realm_name(realm: str) -> str:
    """Return the last path component of a realm, '/' for the root realm."""
    if realm == "/":
        return "/"
    components = realm.split("/")
    return components[-1] or "/"


def get_host_base_url(url: str) -> str:
    """Strip path and query from a URL."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def get_tenant_url(host: str) -> str:
    """Tenant base URL used by the environment (ESV, promotion) APIs."""
    return get_host_base_url(host)


def quote_filter_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted CREST _queryFilter literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def apply_name_collision_policy(name: str) -> str:
    """Return the next '<name> - imported (n)' variant of a colliding name."""
    found = _COLLISION_PATTERN.fullmatch(name)
    if found:
        return f"{found.group(1)} ({int(found.group(2)) + 1})"
    return f"{name} - imported (1)"


# ─────────────────────────────────────────────────────────────────────────────
# Base64 codecs
# ─────────────────────────────────────────────────────────────────────────────
def _pad(data: str) -> str:
    return data + "=" * (-len(data) % 4)


def encode(text: str, padding: bool = True) -> str:
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return encoded if padding else encoded.rstrip("=")


def decode(data: str) -> str:
    return base64.b64decode(_pad(data)).decode("utf-8")


def encode_base64url(text: str) -> str:
    """Unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(text.encode("utf-8", "surrogateescape")).decode("ascii").rstrip("=")


def decode_base64url(data: str) -> str:
    return base64.urlsafe_b64decode(_pad(data)).decode("utf-8", "surrogateescape")


# Line arrays keep exported payloads readable and diff-friendly. Bytes that are
# not valid UTF-8 survive the round trip through surrogateescape.
def base64_to_lines(data: str) -> List[str]:
    return base64.b64decode(_pad(data)).decode("utf-8", "surrogateescape").split("\n")


def lines_to_base64(lines: Iterable[str]) -> str:
    return base64.b64encode("\n".join(lines).encode("utf-8", "surrogateescape")).decode("ascii")


def base64url_to_lines(data: str) -> List[str]:
    return decode_base64url(data).split("\n")


def lines_to_base64url(lines: Iterable[str]) -> str:
    return encode_base64url("\n".join(lines))


# ─────────────────────────────────────────────────────────────────────────────
# JSON helpers
# ─────────────────────────────────────────────────────────────────────────────
def get_path(obj: Any, path: Iterable[str], default: Any = None) -> Any:
    """Walk nested dicts; return default as soon as a key is missing."""
    current = obj
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def delete_deep_by_key(obj: Any, suffix: str) -> Any:
    """Return a deep copy of obj without any dict key ending in suffix."""
    if isinstance(obj, dict):
        return {k: delete_deep_by_key(v, suffix) for k, v in obj.items() if not k.endswith(suffix)}
    if isinstance(obj, list):
        return [delete_deep_by_key(item, suffix) for item in obj]
    return copy.deepcopy(obj)


def get_export_metadata(client: Optional[Any] = None) -> dict:
    """Header stored under 'meta' in every export bundle."""
    try:
        exported_by = getpass.getuser()
    except (KeyError, OSError):
        exported_by = "unknown"
    return {
        "origin": getattr(client, "host", ""),
        "originAmVersion": getattr(client, "am_version", ""),
        "exportedBy": exported_by,
        "exportDate": datetime.now(timezone.utc).isoformat(),
        "exportTool": "idcfg",
        "exportToolVersion": idcfg.__version__,
    }

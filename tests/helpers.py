"""Stubs shared by the unit tests."""
import json
from typing import Optional
from unittest.mock import MagicMock

import requests

from idcfg.core.platform import PlatformAPIError

HOST = "https://tenant.example.com/am"


def make_response(payload=None, status_code: int = 200, text: Optional[str] = None, url: str = HOST):
    """Build a requests.Response-like stub."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.url = url
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    resp.text = text
    resp.content = text.encode("utf-8")
    resp.json.return_value = payload
    return resp


def api_error(status_code: int = 500, message: str = "boom", endpoint: str = "/json/test"):
    return PlatformAPIError(status_code, message, endpoint)

"""EVE Workbench client: look up characters for an API key and post bounty updates.

Best effort: failures are logged and reported as False / empty, never raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests

from ..errors import SubmissionError

log = logging.getLogger("bountycounter.submit")

CHARACTERS_PATH = "v{version}/characters"
BOUNTY_PATH = "v{version}/eve-journal/realtime-bounty-update/{character_id}"


@dataclass
class CharacterRecord:
    name: str
    id: int


class WorkbenchClient:
    def __init__(self, base_url: str, timeout_s: float = 10.0, session: Optional[requests.Session] = None, version: int = 1):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout_s = timeout_s
        self.version = version
        self._session = session or requests.Session()

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {"x-api-key": api_key}

    def _send(self, method: str, path: str, api_key: str, body: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = self.base_url + path
        try:
            r = self._session.request(method, url, headers=self._headers(api_key), json=body, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise SubmissionError(f"{method} {url} failed: {e}") from e
        if not r.ok:
            raise SubmissionError(f"{method} {url} -> HTTP {r.status_code}")
        log.debug("%s %s -> %s", method, url, r.status_code)
        return r

    def get_characters(self, api_key: str) -> List[CharacterRecord]:
        try:
            r = self._send("GET", CHARACTERS_PATH.format(version=self.version), api_key)
            data = r.json() or []
            out = []
            for c in data:
                name = c.get("name") or c.get("Name")
                if not isinstance(name, str) or not name.strip():
                    raise KeyError("name")
                out.append(CharacterRecord(name=name.strip(), id=int(c.get("id", c.get("Id")))))
            return out
        except (SubmissionError, ValueError, KeyError, TypeError, AttributeError) as e:
            log.warning("character lookup failed: %s", e)
            return []

    def submit_bounty(self, api_key: str, character_id: int, amount: Decimal) -> bool:
        path = BOUNTY_PATH.format(version=self.version, character_id=character_id)
        try:
            self._send("POST", path, api_key, {"bounty": float(amount)})
        except SubmissionError as e:
            log.warning("bounty submission for %s failed: %s", character_id, e)
            return False
        return True

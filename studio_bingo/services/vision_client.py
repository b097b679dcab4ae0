"""Adapter for the external vision model (OpenAI Responses API).

Everything that deals with the model's free-form output (code fences, stray
text around the JSON object) stays in this module. Callers get a parsed JSON
object or an UpstreamError.
"""

from __future__ import annotations

import base64
import json
import logging
import re
from collections.abc import Mapping
from typing import Any

import requests
from flask import Flask, current_app
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from studio_bingo.errors import ServiceUnavailableError, UpstreamError

logger = logging.getLogger(__name__)

MAX_DIAGNOSTIC_CHARS = 2000

MARKS_PROMPT = (
    "You are given a photo of a paper bingo card. "
    "The card contains a 5x5 grid of squares. "
    "TASK 1: Find the week identifier on the card. Look for text like 'Week 1', 'Week 2', 'WEEK 3', etc. "
    "Return the week as 'week1', 'week2', etc. (lowercase, no space). If not found, use null. "
    "TASK 2: Detect which grid cells contain a clear handwritten mark such as an X, checkmark, or filled/scribbled area. "
    "Ignore printed text, titles, logos, cell borders, and shadows. "
    "Be CONSERVATIVE: only report marks you are confident about. "
    "If a cell has no obvious handwritten mark, do NOT include it. "
    "Shadows, glare, printing artifacts, and smudges are NOT marks. "
    "If the card appears blank or you see no clear marks, return an empty marked_cells array. "
    "Return JSON only with schema: { week: string|null, marked_cells: [{r:0..4,c:0..4}], confidence: 0..1, notes: string }. "
    "Use 0-based row and column indices with top-left as r=0,c=0. "
    "Do not include any extra keys."
)

LABELS_PROMPT = (
    "You are given an image of a bingo card with a 5x5 grid. "
    "Extract the text from each cell, reading left-to-right, top-to-bottom. "
    'Return JSON: {"cells": ["cell 0 text", "cell 1 text", ..., "cell 24 text"]} '
    "Include exactly 25 strings. If a cell is empty or unreadable, use an empty string."
)

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")
_FENCE_CLOSE = re.compile(r"```\s*$")


def _build_http_session(retries: int, backoff_factor: float = 0.5) -> requests.Session:
    """Create a requests session that retries connection failures and 429/5xx."""

    retry = Retry(
        total=retries,
        connect=retries,
        read=0,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"POST"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def extract_response_text(data: Mapping[str, Any]) -> str:
    """Pull the model's text out of a Responses API payload."""

    output_text = data.get("output_text")
    if isinstance(output_text, str) and output_text.strip():
        return output_text.strip()

    chunks: list[str] = []
    for item in data.get("output") or []:
        if not isinstance(item, Mapping) or item.get("type") != "message":
            continue
        for part in item.get("content") or []:
            if isinstance(part, Mapping) and isinstance(part.get("text"), str):
                chunks.append(part["text"])
    return "".join(chunks).strip()


def strip_json_fences(text: str) -> str:
    """Drop markdown fences and anything outside the outermost braces."""

    t = str(text or "").strip()
    if t.startswith("```"):
        t = _FENCE_OPEN.sub("", t)
        t = _FENCE_CLOSE.sub("", t).strip()

    first, last = t.find("{"), t.rfind("}")
    if first >= 0 and last > first:
        t = t[first : last + 1]
    return t


class VisionClient:
    """Sends a card photo plus a prompt to the model and returns its JSON answer."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout_sec: float = 30,
        retries: int = 2,
        http: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._url = base_url.rstrip("/") + "/responses"
        self._timeout = timeout_sec
        self._http = http or _build_http_session(retries)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "VisionClient":
        return cls(
            api_key=str(config.get("OPENAI_API_KEY") or ""),
            model=str(config.get("OPENAI_MODEL") or "gpt-4.1-mini"),
            base_url=str(config.get("OPENAI_BASE_URL") or "https://api.openai.com/v1"),
            timeout_sec=float(config.get("VISION_TIMEOUT_SEC", 30)),
            retries=int(config.get("VISION_RETRIES", 2)),
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def detect_marks(self, image: bytes, mime_type: str) -> dict[str, Any]:
        """Ask for the week label and marked cells. Returns the raw parsed object."""

        return self._ask(MARKS_PROMPT, image, mime_type)

    def read_cell_labels(self, image: bytes, mime_type: str) -> Any:
        """Ask for the printed text of each cell. Returns the ``cells`` value as sent."""

        return self._ask(LABELS_PROMPT, image, mime_type).get("cells")

    def _ask(self, prompt: str, image: bytes, mime_type: str) -> dict[str, Any]:
        if not self.configured:
            raise ServiceUnavailableError("Vision service is not configured", code="vision_not_configured")

        image_url = f"data:{mime_type or 'image/jpeg'};base64,{base64.b64encode(image).decode('ascii')}"
        body = {
            "model": self._model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_url},
                    ],
                }
            ],
            "text": {"format": {"type": "json_object"}},
        }

        try:
            resp = self._http.post(
                self._url,
                json=body,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
            )
        except requests.Timeout as exc:
            logger.warning("Vision call timed out after %ss", self._timeout)
            raise UpstreamError(
                message="Vision service timed out",
                details={"timeout_sec": self._timeout},
                code="upstream_timeout",
                retryable=True,
            ) from exc
        except requests.RequestException as exc:
            logger.warning("Vision call failed: %s", exc)
            raise UpstreamError(
                message="Vision service unreachable",
                details={"error": str(exc)[:MAX_DIAGNOSTIC_CHARS]},
                code="upstream_unreachable",
                retryable=True,
            ) from exc

        if not resp.ok:
            logger.warning("Vision call returned HTTP %s", resp.status_code)
            raise UpstreamError(
                message=f"Vision service returned HTTP {resp.status_code}",
                details={"status": resp.status_code, "body": resp.text[:MAX_DIAGNOSTIC_CHARS]},
                code="openai_error",
                retryable=resp.status_code >= 500 or resp.status_code == 429,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError(
                message="Vision service returned a non-JSON body",
                details={"raw": resp.text[:MAX_DIAGNOSTIC_CHARS]},
                code="bad_openai_json",
            ) from exc

        raw = extract_response_text(data) if isinstance(data, Mapping) else ""
        cleaned = strip_json_fences(raw)
        try:
            parsed = json.loads(cleaned)
        except ValueError as exc:
            raise UpstreamError(
                message="Vision answer is not valid JSON",
                details={"raw": raw[:MAX_DIAGNOSTIC_CHARS], "cleaned": cleaned[:MAX_DIAGNOSTIC_CHARS]},
                code="bad_openai_json",
            ) from exc

        if not isinstance(parsed, dict):
            raise UpstreamError(
                message="Vision answer is not a JSON object",
                details={"raw": raw[:MAX_DIAGNOSTIC_CHARS]},
                code="bad_openai_json",
            )
        return parsed


def init_vision(app: Flask) -> None:
    """Attach a vision client built from the app config."""

    app.extensions["vision_client"] = VisionClient.from_config(app.config)


def get_vision_client() -> VisionClient:
    client: VisionClient | None = current_app.extensions.get("vision_client")
    if client is None:
        raise RuntimeError("Vision client not initialized")
    return client

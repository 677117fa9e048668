"""Blocking REST client for the Gemini ``generateContent`` endpoint.

Used for two small jobs: one-line clue text and JSON word lists. Callers in
async code run it through ``asyncio.to_thread``.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import requests

from ..utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


class GeminiAPIError(RuntimeError):
    """Raised when the Gemini API fails or its reply cannot be used."""


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.splitlines()
    inner = lines[1:-1] if lines[-1].strip().startswith("```") else lines[1:]
    return "\n".join(inner).strip()


class GeminiClient:
    """Thin client: one prompt in, first candidate text out."""

    API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        timeout_seconds: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise RuntimeError("Gemini API key is empty")
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._api_key = api_key
        self._session = session or requests.Session()

    @classmethod
    def from_env(
        cls,
        api_key_env: str = "GEMINI_API_KEY",
        model_env: str = "GEMINI_MODEL",
        **kwargs: Any,
    ) -> "GeminiClient":
        """Build a client from ``GEMINI_API_KEY`` / ``GEMINI_MODEL``."""
        api_key = os.environ.get(api_key_env)
        if not api_key:
            raise RuntimeError(f"Missing Gemini API key in environment variable {api_key_env}")
        kwargs.setdefault("model_name", os.environ.get(model_env) or DEFAULT_MODEL)
        return cls(api_key, **kwargs)

    @property
    def endpoint(self) -> str:
        return f"{self.API_BASE}/models/{self.model_name}:generateContent"

    def generate_text(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.5,
        max_output_tokens: int = 50,
    ) -> str:
        """Send the prompt and return the first candidate text."""
        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        try:
            response = self._session.post(
                self.endpoint,
                params={"key": self._api_key},
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise GeminiAPIError(f"Gemini request failed: {exc}") from exc

        data = response.json()
        text = self._first_text(data)
        if not text:
            LOGGER.warning("Gemini reply without text (model=%s)", self.model_name)
            raise GeminiAPIError("Gemini API response missing text candidates")
        return text

    def generate_json(self, prompt: str, **kwargs: Any) -> Any:
        """Like :meth:`generate_text` but decode the reply as JSON (code fences allowed)."""
        text = self.generate_text(prompt, **kwargs)
        try:
            return json.loads(strip_code_fence(text))
        except json.JSONDecodeError as exc:
            raise GeminiAPIError(f"Gemini reply is not JSON: {text[:80]!r}") from exc

    @staticmethod
    def _first_text(payload: Dict[str, Any]) -> Optional[str]:
        candidates: List[Dict[str, Any]] = payload.get("candidates") or []
        for candidate in candidates:
            parts: List[Dict[str, Any]] = (candidate.get("content") or {}).get("parts") or []
            for part in parts:
                if part.get("text"):
                    return part["text"]
        return None

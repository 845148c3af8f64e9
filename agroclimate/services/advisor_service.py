"""Advisor notes — optional LLM narrative over computed insights, with a deterministic fallback."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from agroclimate.config import get_settings
from agroclimate.errors import DataUnavailableError

_logger = logging.getLogger("agroclimate.advisor")

SOURCE_NAME = "advisor"


class AdvisorService:
	def __init__(self, http_client: httpx.AsyncClient | None = None):
		self.http_client = http_client
		self.settings = get_settings()

	async def narrate(self, *, topic: str, context: dict[str, Any], fallback: str) -> str:
		"""Return a short farmer-facing note about ``context``.

		Falls back to ``fallback`` when no API key is configured or the reply
		cannot be parsed. Transport failures raise DataUnavailableError.
		"""
		if not self.settings.anthropic_api_key:
			return fallback

		payload = await self.call_llm(topic=topic, context=context)
		note = self.parse_note(payload)
		if note is None:
			_logger.warning("advisor_reply_unparsed", extra={"topic": topic})
			return fallback
		return note

	async def call_llm(self, *, topic: str, context: dict[str, Any]) -> dict[str, Any]:
		system_prompt = (
			"You are an agricultural advisor for farmers in Zimbabwe. "
			"Answer only from the provided context. "
			"Keep the note under 80 words. "
			"Return strict JSON with a single key: note."
		)
		headers = {
			"x-api-key": self.settings.anthropic_api_key,
			"anthropic-version": "2023-06-01",
			"content-type": "application/json",
		}
		body = {
			"model": self.settings.anthropic_model,
			"max_tokens": 400,
			"system": system_prompt,
			"messages": [{"role": "user", "content": json.dumps({"topic": topic, "context": context}, default=str)}],
		}

		try:
			if self.http_client is not None:
				response = await self.http_client.post(self.settings.anthropic_base_url, headers=headers, json=body)
				response.raise_for_status()
				return response.json()
			async with httpx.AsyncClient(timeout=self.settings.anthropic_timeout_seconds) as client:
				response = await client.post(self.settings.anthropic_base_url, headers=headers, json=body)
				response.raise_for_status()
				return response.json()
		except httpx.HTTPError as exc:
			_logger.error("advisor_call_failed", extra={"topic": topic, "error": str(exc)})
			raise DataUnavailableError(SOURCE_NAME, str(exc)) from exc
		except ValueError as exc:
			raise DataUnavailableError(SOURCE_NAME, "response body is not valid JSON") from exc

	@staticmethod
	def parse_note(payload: Any) -> str | None:
		if not isinstance(payload, dict):
			return None
		content = payload.get("content")
		if not isinstance(content, list) or not content or not isinstance(content[0], dict):
			return None
		text = str(content[0].get("text") or "").strip()
		try:
			parsed = json.loads(text)
		except json.JSONDecodeError:
			return None
		if not isinstance(parsed, dict):
			return None
		note = str(parsed.get("note") or "").strip()
		return note or None

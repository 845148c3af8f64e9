"""Shared plumbing for upstream HTTP data sources: timeouts, error mapping, timing logs."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from agroclimate.errors import DataUnavailableError

_logger = logging.getLogger("agroclimate.upstream")


def _upstream_timing(source: str, op: str, start: float, ok: bool, error: str | None = None) -> None:
	duration_ms = round((time.perf_counter() - start) * 1000.0, 2)
	extra = {
		"source": source,
		"operation": op,
		"duration_ms": duration_ms,
		"ok": ok,
		"error": error,
	}
	if ok:
		_logger.info("upstream_call", extra=extra)
	else:
		_logger.error("upstream_call_failed", extra=extra)


async def _get(client: httpx.AsyncClient, url: str, params: dict[str, Any]) -> Any:
	response = await client.get(url, params=params)
	response.raise_for_status()
	return response.json()


async def fetch_json(
	*,
	source: str,
	op: str,
	url: str,
	params: dict[str, Any],
	timeout: float,
	client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
	"""GET ``url`` and return the decoded JSON object.

	The whole exchange is bounded by ``timeout``. Transport failures, non-2xx
	responses and non-object bodies raise DataUnavailableError; cancellation
	propagates unchanged.
	"""
	start = time.perf_counter()
	try:
		if client is not None:
			payload = await asyncio.wait_for(_get(client, url, params), timeout=timeout)
		else:
			async with httpx.AsyncClient(timeout=timeout) as owned:
				payload = await asyncio.wait_for(_get(owned, url, params), timeout=timeout)
	except TimeoutError as exc:
		_upstream_timing(source, op, start, False, "timeout")
		raise DataUnavailableError(source, f"no response within {timeout}s") from exc
	except httpx.HTTPStatusError as exc:
		_upstream_timing(source, op, start, False, f"http {exc.response.status_code}")
		raise DataUnavailableError(source, f"upstream returned {exc.response.status_code}") from exc
	except httpx.HTTPError as exc:
		_upstream_timing(source, op, start, False, str(exc))
		raise DataUnavailableError(source, f"transport error: {exc}") from exc
	except ValueError as exc:
		_upstream_timing(source, op, start, False, "invalid json")
		raise DataUnavailableError(source, "response body is not valid JSON") from exc

	if not isinstance(payload, dict):
		_upstream_timing(source, op, start, False, "unexpected payload")
		raise DataUnavailableError(source, "response body is not a JSON object")
	_upstream_timing(source, op, start, True)
	return payload

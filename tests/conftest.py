"""Shared pytest fixtures — async test client, fake Redis, sample observations and soil."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Iterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from agroclimate.config import get_settings
from agroclimate.main import app
from agroclimate.schemas.weather import SoilData, WeatherObservation


class FakePubSub:
	def __init__(self, payloads: list[dict[str, Any]]) -> None:
		self.payloads = payloads
		self.index = 0
		self.subscribed_channel: str | None = None
		self.unsubscribed_channel: str | None = None
		self.closed = False

	async def subscribe(self, channel: str) -> None:
		self.subscribed_channel = channel

	async def get_message(self, ignore_subscribe_messages: bool, timeout: float) -> dict[str, Any] | None:
		if self.index >= len(self.payloads):
			return None
		message = self.payloads[self.index]
		self.index += 1
		return message

	async def unsubscribe(self, channel: str) -> None:
		self.unsubscribed_channel = channel

	async def close(self) -> None:
		self.closed = True


class FakeRedis:
	def __init__(self, payloads: list[dict[str, Any]] | None = None) -> None:
		self.payloads = payloads or []
		self.publish = AsyncMock(return_value=1)
		self.setex = AsyncMock(return_value=True)
		self.get = AsyncMock(return_value=None)
		self.ping = AsyncMock(return_value=True)
		self.last_pubsub: FakePubSub | None = None

	def pubsub(self) -> FakePubSub:
		self.last_pubsub = FakePubSub(self.payloads)
		return self.last_pubsub


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
	"""Keep tests off real upstream credentials and reset the settings cache."""
	monkeypatch.setenv("ANTHROPIC_API_KEY", "")
	monkeypatch.setenv("REDIS_ENABLED", "true")
	get_settings.cache_clear()
	yield
	get_settings.cache_clear()


@pytest.fixture
def fake_redis() -> FakeRedis:
	"""Reusable fake Redis client with async get/setex/publish and pubsub behavior."""
	return FakeRedis()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled and no Redis attached."""
	original_lifespan = app.router.lifespan_context
	original_redis = getattr(app.state, "redis", None)

	@asynccontextmanager
	async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
		yield

	app.router.lifespan_context = noop_lifespan
	app.state.redis = None

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.state.redis = original_redis
	app.dependency_overrides.clear()


def make_observations(
	start: datetime,
	days: int,
	*,
	temperature: float = 22.0,
	humidity: float = 65.0,
	precipitation: float = 3.0,
	temperature_step: float = 0.0,
) -> list[WeatherObservation]:
	return [
		WeatherObservation(
			timestamp=start + timedelta(days=offset),
			temperature=temperature + temperature_step * offset,
			humidity=humidity,
			precipitation=precipitation,
			wind_speed=8.0,
		)
		for offset in range(days)
	]


@pytest.fixture
def observation_factory() -> Callable[..., list[WeatherObservation]]:
	return make_observations


@pytest.fixture
def summer_observations() -> list[WeatherObservation]:
	"""December 2023 through February 2024: one summer window (season year 2024)."""
	return make_observations(datetime(2023, 12, 1, tzinfo=UTC), 91)


@pytest.fixture
def current_weather() -> WeatherObservation:
	return WeatherObservation(
		timestamp=datetime(2024, 1, 15, 12, tzinfo=UTC),
		temperature=25.0,
		humidity=60.0,
		precipitation=2.0,
		wind_speed=10.0,
	)


@pytest.fixture
def loam_soil() -> SoilData:
	return SoilData(
		location="Harare",
		ph=6.5,
		organic_matter=3.0,
		nitrogen=40.0,
		phosphorus=20.0,
		potassium=170.0,
		soil_moisture=35.0,
		soil_temperature=22.0,
		last_updated=datetime(2024, 1, 15, tzinfo=UTC),
	)

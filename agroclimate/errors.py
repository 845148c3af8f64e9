"""Error taxonomy shared by the engine, the services and the HTTP layer.

Each error also derives from the builtin exception the route layer already
understands, so ``LookupError`` maps to 404 and ``ValueError`` to 400 without
the routes importing this module.
"""

from __future__ import annotations


class AgroClimateError(Exception):
	"""Base class for all prediction engine failures."""


class UnknownLocationError(AgroClimateError, LookupError):
	"""Raised when a location identifier is not in the registry."""

	def __init__(self, location: str):
		super().__init__(f"unknown location: {location!r}")
		self.location = location


class InvalidParameterError(AgroClimateError, ValueError):
	"""Raised for out-of-range or unrecognized request parameters."""


class DataUnavailableError(AgroClimateError, RuntimeError):
	"""Raised when an upstream weather or soil source fails or returns nothing."""

	def __init__(self, source: str, reason: str):
		super().__init__(f"{source} unavailable: {reason}")
		self.source = source
		self.reason = reason

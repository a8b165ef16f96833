"""Exceptions raised by the pool statistics collector."""

from __future__ import annotations

from typing import Any


class PoolStatsError(Exception):
    """Base exception for all poolstats errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(PoolStatsError):
    """The pools configuration file could not be read."""


class RecordDecodeError(PoolStatsError):
    """An API response body did not match the expected record schema."""

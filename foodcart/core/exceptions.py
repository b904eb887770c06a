"""Custom exceptions for FoodCart."""
from __future__ import annotations


class FoodCartException(Exception):
    """Base exception for all FoodCart errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class StorageException(FoodCartException):
    """Durable key-value storage is unavailable or rejected an operation."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class ConfigurationException(FoodCartException):
    """Configuration errors."""

    pass


class RemoteApiException(FoodCartException):
    """Remote order API returned an unusable response."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


__all__ = [
    "FoodCartException",
    "StorageException",
    "ConfigurationException",
    "RemoteApiException",
]

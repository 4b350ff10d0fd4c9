"""Errors raised by the scoped store."""

from __future__ import annotations


class StoreError(Exception):
    """Base error for the memstore package."""


class AlreadyExistsError(StoreError):
    """Raised when creating a record whose identifier is already stored."""

    def __init__(self, identifier: str, partition: str) -> None:
        super().__init__(f"Item with ID '{identifier}' already exists for scope '{partition}'")
        self.identifier = identifier
        self.partition = partition


class NotFoundError(StoreError, KeyError):
    """Raised when an identifier is not present in the addressed partition."""

    def __init__(self, identifier: str, partition: str) -> None:
        super().__init__(f"Item with ID '{identifier}' not found for scope '{partition}'")
        self.identifier = identifier
        self.partition = partition

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class IdentifierMismatchError(StoreError, ValueError):
    """Raised when an update's record carries a different identifier than the one addressed."""

    def __init__(self, identifier: str, incoming: str, partition: str) -> None:
        super().__init__(
            f"Item ID '{incoming}' does not match path ID '{identifier}' for scope '{partition}'"
        )
        self.identifier = identifier
        self.incoming = incoming
        self.partition = partition


class InvalidArgumentError(StoreError, ValueError):
    """Raised for invalid construction data or malformed query directives."""

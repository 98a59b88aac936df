from __future__ import annotations

from abc import ABC, abstractmethod

from ..plugin import Plugin


class AwaitingActivationRepo(ABC):
    """Repository interface for pending account activations."""

    @abstractmethod
    def insert(self, user_id: int, key: int, plugin: Plugin) -> None:
        """Add a new user/key pair."""

    @abstractmethod
    def delete(self, user_id: int, key: int, plugin: Plugin) -> None:
        """Remove the pair. Does nothing if it is absent."""

    @abstractmethod
    def exists(self, user_id: int, key: int, plugin: Plugin) -> bool:
        """Return whether the exact user/key pair is present."""

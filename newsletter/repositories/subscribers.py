from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..plugin import Plugin


@dataclass
class Subscriber:
    id: int | None
    email: str


class SubscribersRepo(ABC):
    """Repository interface for subscriber details."""

    @abstractmethod
    def insert(self, subscriber: Subscriber, plugin: Plugin) -> int:
        """Persist a subscriber and return its identifier."""

    @abstractmethod
    def load(self, subscriber_id: int, plugin: Plugin) -> Optional[Subscriber]:
        """Return a subscriber by identifier if present."""

    @abstractmethod
    def find_by_email(self, email: str, plugin: Plugin) -> Optional[Subscriber]:
        """Return the subscriber with ``email``, ignoring case."""

    @abstractmethod
    def delete(self, subscriber_id: int, plugin: Plugin) -> None:
        """Remove a subscriber by identifier."""

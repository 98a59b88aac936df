from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..plugin import Plugin


@dataclass
class NewsLetter:
    """A configured bulk-mailing definition."""

    id: int
    name: str
    description: str = ""
    date_last_sending: datetime | None = None
    html: str = ""
    template_id: int = 0
    workgroup: str = "all"
    unsubscribe: bool = True
    sender_mail: str = ""
    sender_name: str = ""
    test_recipients: str = ""

    def __post_init__(self) -> None:
        # Stored as UTC; keep loaded and constructed records comparable
        sent = self.date_last_sending
        if sent is not None:
            if sent.tzinfo is None:
                self.date_last_sending = sent.replace(tzinfo=timezone.utc)
            else:
                self.date_last_sending = sent.astimezone(timezone.utc)


@dataclass(frozen=True)
class Document:
    """Portal document, read-only from the newsletter side."""

    id: int
    code_document_type: str
    title: str
    summary: str | None
    date_publishing: datetime


@dataclass(frozen=True)
class ReferenceItem:
    """One ``(code, name)`` entry of a list used to populate choices."""

    code: int
    name: str


class NewsLetterRepo(ABC):
    """Repository interface for newsletters, their subscribers and categories."""

    # -- newsletter lifecycle ------------------------------------------------

    @abstractmethod
    def insert(self, newsletter: NewsLetter, plugin: Plugin) -> None:
        """Persist a newsletter under its caller-supplied identifier.

        The identifier is expected to come from :meth:`new_primary_key`.
        """

    @abstractmethod
    def delete(self, newsletter_id: int, plugin: Plugin) -> None:
        """Remove the newsletter row.

        Subscriptions and category links are not removed. The caller must
        delete them first or the foreign key check fails.
        """

    @abstractmethod
    def load(self, newsletter_id: int, plugin: Plugin) -> Optional[NewsLetter]:
        """Return the newsletter, or ``None`` if it does not exist."""

    @abstractmethod
    def store(self, newsletter: NewsLetter, plugin: Plugin) -> None:
        """Update every field of the newsletter with the same identifier."""

    @abstractmethod
    def check_primary_key(self, key: int, plugin: Plugin) -> bool:
        """Return whether a newsletter with identifier ``key`` exists."""

    @abstractmethod
    def new_primary_key(self, plugin: Plugin) -> int:
        """Return an identifier never handed out before and not in use."""

    @abstractmethod
    def check_linked_portlet(self, newsletter_id: int) -> bool:
        """Return whether a document list is associated with the newsletter."""

    @abstractmethod
    def select_all(self, plugin: Plugin) -> list[NewsLetter]:
        """Return every newsletter, in no particular order."""

    @abstractmethod
    def select_all_id(self, plugin: Plugin) -> list[ReferenceItem]:
        """Return ``(id, name)`` of every newsletter, ordered by name."""

    # -- subscribers ---------------------------------------------------------

    @abstractmethod
    def insert_subscriber(
        self,
        newsletter_id: int,
        subscriber_id: int,
        today: datetime,
        plugin: Plugin,
        *,
        validated: bool = False,
    ) -> None:
        """Register a subscriber to a newsletter.

        Callers check :meth:`is_registered` first; a duplicate registration
        raises :class:`sqlite3.IntegrityError`.
        """

    @abstractmethod
    def delete_old_unconfirmed(self, confirm_limit_date: datetime, plugin: Plugin) -> None:
        """Delete unconfirmed subscriptions registered before ``confirm_limit_date``."""

    @abstractmethod
    def validate_subscriber(self, newsletter_id: int, subscriber_id: int, plugin: Plugin) -> None:
        """Mark a subscription as confirmed."""

    @abstractmethod
    def delete_subscriber(self, newsletter_id: int, subscriber_id: int, plugin: Plugin) -> None:
        """Remove a subscription."""

    @abstractmethod
    def is_registered(self, newsletter_id: int, subscriber_id: int, plugin: Plugin) -> bool:
        """Return whether the subscriber is registered to the newsletter."""

    @abstractmethod
    def select_nbr_subscribers(
        self, newsletter_id: int, search_string: str | None, plugin: Plugin
    ) -> int:
        """Count subscriptions, optionally filtered on the subscriber email."""

    @abstractmethod
    def select_nbr_active_subscribers(
        self, newsletter_id: int, search_string: str | None, plugin: Plugin
    ) -> int:
        """Count confirmed subscriptions, optionally filtered on the subscriber email."""

    # -- categories and documents -------------------------------------------

    @abstractmethod
    def is_template_used(self, template_id: int, plugin: Plugin) -> bool:
        """Return whether a newsletter uses the template."""

    @abstractmethod
    def select_document_list(self, portlet_id: int) -> Optional[str]:
        """Return the document type code shown by a document-list portlet."""

    @abstractmethod
    def select_newsletter_category_ids(self, newsletter_id: int, plugin: Plugin) -> list[int]:
        """Return the category identifiers linked to the newsletter."""

    @abstractmethod
    def associate_newsletter_document_list(
        self, newsletter_id: int, document_list_id: int, plugin: Plugin
    ) -> None:
        """Link a document list to the newsletter."""

    @abstractmethod
    def delete_newsletter_document_list(self, newsletter_id: int, plugin: Plugin) -> None:
        """Remove every document list linked to the newsletter."""

    @abstractmethod
    def select_documents_by_date_and_list(
        self, category_id: int, date_last_sending: datetime
    ) -> list[Document]:
        """Return documents of a category published after ``date_last_sending``."""

    @abstractmethod
    def select_document_type_portlets(self) -> list[ReferenceItem]:
        """Return the portlets that display document lists."""

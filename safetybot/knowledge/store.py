"""In-memory knowledge store.

Loaded once at startup and shared read-only by every request. The only
mutation is :meth:`KnowledgeStore.add_knowledge_item`, which appends an FAQ
item to a group and persists the FAQ document back to disk.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import Any

from .loader import (
    KnowledgeDocument,
    StoreLoadError,
    faq_record,
    load_cases,
    load_knowledge_document,
    load_laws,
)
from .models import KnowledgeGroup, Record, RecordCategory, faq_item_to_dict

logger = logging.getLogger(__name__)


class UnknownGroupError(KeyError):
    """Raised when adding to an FAQ group that does not exist."""

    pass


class StorePersistError(Exception):
    """Raised when the FAQ document cannot be written back to disk."""

    pass


class KnowledgeStore:
    """FAQ groups, case reports and law articles held in memory.

    Iteration order (used as the ranking tie-break) is: FAQ groups in file
    order with their items in file order, then cases, then laws.
    """

    def __init__(
        self,
        groups: list[KnowledgeGroup] | None = None,
        cases: list[Record] | None = None,
        laws: list[Record] | None = None,
        metadata: dict[str, Any] | None = None,
        knowledge_path: Path | None = None,
        version: str = "1.0",
        generated: str | None = None,
    ):
        self._groups: list[KnowledgeGroup] = list(groups or [])
        self._cases: tuple[Record, ...] = tuple(cases or ())
        self._laws: tuple[Record, ...] = tuple(laws or ())
        self._metadata: dict[str, Any] = dict(metadata or {})
        self._knowledge_path = knowledge_path
        self._version = version
        self._generated = generated
        self._write_lock = threading.Lock()

    @classmethod
    def load(
        cls,
        knowledge_path: str | Path,
        cases_path: str | Path | None = None,
        laws_path: str | Path | None = None,
    ) -> KnowledgeStore:
        """Load all configured files.

        A file that is missing or malformed leaves its collection empty; the
        failure is logged and the process keeps running.
        """
        knowledge_path = Path(knowledge_path)
        try:
            document = load_knowledge_document(knowledge_path)
        except StoreLoadError as e:
            logger.warning("Knowledge base unavailable, starting empty: %s", e)
            document = KnowledgeDocument()

        cases: list[Record] = []
        if cases_path:
            try:
                cases = load_cases(Path(cases_path))
            except StoreLoadError as e:
                logger.warning("Case reports unavailable: %s", e)

        laws: list[Record] = []
        if laws_path:
            try:
                laws = load_laws(Path(laws_path))
            except StoreLoadError as e:
                logger.warning("Law articles unavailable: %s", e)

        store = cls(
            groups=document.groups,
            cases=cases,
            laws=laws,
            metadata=document.metadata,
            knowledge_path=knowledge_path,
            version=document.version,
            generated=document.generated,
        )
        logger.info(
            "Knowledge store loaded: %d FAQ items, %d cases, %d laws",
            len(store.knowledge_items),
            len(store.cases),
            len(store.laws),
        )
        return store

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def groups(self) -> list[KnowledgeGroup]:
        return list(self._groups)

    @property
    def knowledge_items(self) -> list[Record]:
        return [item for group in self._groups for item in group.items]

    @property
    def cases(self) -> tuple[Record, ...]:
        return self._cases

    @property
    def laws(self) -> tuple[Record, ...]:
        return self._laws

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    def records(self) -> Iterator[Record]:
        """Iterate every record in store order."""
        # Snapshot the group list so a concurrent add cannot change it mid-scan
        for group in list(self._groups):
            yield from group.items
        yield from self._cases
        yield from self._laws

    def counts(self) -> dict[RecordCategory, int]:
        return {
            RecordCategory.KNOWLEDGE: len(self.knowledge_items),
            RecordCategory.CASE: len(self._cases),
            RecordCategory.LAW: len(self._laws),
        }

    def __len__(self) -> int:
        return sum(self.counts().values())

    def get_group(self, group_id: str) -> KnowledgeGroup | None:
        for group in self._groups:
            if group.id == group_id:
                return group
        return None

    def to_document(
        self,
        groups: list[KnowledgeGroup] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Render the FAQ document in its on-disk shape."""
        groups = self._groups if groups is None else groups
        metadata = self._metadata if metadata is None else metadata
        return {
            "version": self._version,
            "generated": self._generated,
            "count": sum(len(g.items) for g in groups),
            "categories": [g.to_dict() for g in groups],
            "metadata": dict(metadata),
        }

    # =========================================================================
    # Append path
    # =========================================================================

    def add_knowledge_item(
        self,
        group_id: str,
        question: str,
        answer: str,
        keywords: list[str],
        today: date | None = None,
    ) -> Record:
        """Append an FAQ item to ``group_id`` and persist the FAQ document.

        Adds are serialized. The file is written first; the in-memory store only
        changes once the write succeeded, so a failed write leaves both the
        file and the store untouched.

        Raises:
            UnknownGroupError: If no group has ``group_id``.
            StorePersistError: If the document cannot be written.
        """
        with self._write_lock:
            group = self.get_group(group_id)
            if group is None:
                raise UnknownGroupError(group_id)

            record = faq_record(
                group.id,
                group.name,
                len(group.items),
                {"question": question, "answer": answer, "keywords": keywords},
            )
            updated_group = KnowledgeGroup(id=group.id, name=group.name, items=[*group.items, record])
            groups = [updated_group if g.id == group.id else g for g in self._groups]

            metadata = dict(self._metadata)
            metadata["last_updated"] = (today or date.today()).isoformat()

            if self._knowledge_path is not None:
                self._write_document(self.to_document(groups, metadata))

            self._metadata = metadata
            self._groups = groups

        logger.info("Added knowledge item to %s: %s", group_id, question)
        return record

    def _write_document(self, document: dict[str, Any]) -> None:
        path = self._knowledge_path
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".knowledge-", suffix=".json", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save knowledge base to %s: %s", path, e)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorePersistError(str(e)) from e

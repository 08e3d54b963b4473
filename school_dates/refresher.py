"""
Refresh orchestrator for the school dates pipeline.

Coordinates:
- Source page fetch
- HTML to document transformation
- Change detection against the stored document
- Validation and commit
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import httpx
import structlog

from . import __version__
from .config.loader import SchoolConfig
from .core.assembler import (
    build_items,
    count_items,
    group_academic_years,
    hash_academic_years,
    normalize_academic_years,
)
from .core.errors import ConfigurationError, ValidationFailedError
from .core.http_client import USER_AGENT, HttpClient
from .core.identifiers import IdRegistry
from .core.models import SchoolDatesDocument, SchoolDatesSource
from .core.validation import validate_document
from .parsers.blocks import collect_blocks
from .parsers.interpreter import interpret_blocks
from .storage.kv import KeyValueStore, school_dates_key

logger = structlog.get_logger(__name__)


@dataclass
class RefreshResult:
    """Outcome of one refresh run."""

    updated: bool
    school: str
    fetched_at: str
    items: int
    academic_years: int
    content_hash: str
    document: SchoolDatesDocument

    def summary(self) -> dict:
        return {
            "updated": self.updated,
            "school": self.school,
            "fetchedAt": self.fetched_at,
            "items": self.items,
            "academicYears": self.academic_years,
            "contentHash": self.content_hash,
        }


def build_document(
    html: str,
    fetched_at: str,
    config: SchoolConfig,
    etag: Optional[str] = None,
    last_modified: Optional[str] = None,
) -> SchoolDatesDocument:
    """
    Transform source HTML into a normalized, hashed document.

    Args:
        html: Source page HTML
        fetched_at: ISO-8601 fetch timestamp
        config: School identity and tags
        etag: ETag response header, if any
        last_modified: Last-Modified response header, if any

    Returns:
        Document with sorted academic years and source.content_hash set

    Raises:
        ParseError: If any item's date text cannot be resolved
    """
    blocks = collect_blocks(html)
    candidates = interpret_blocks(blocks)
    items = build_items(candidates, config.school_slug, config.tags, IdRegistry())
    years = normalize_academic_years(group_academic_years(items))
    content_hash = hash_academic_years(years)

    logger.info(
        "document_built",
        school=config.school_slug,
        blocks=len(blocks),
        items=count_items(years),
        academic_years=len(years),
    )

    return SchoolDatesDocument(
        source=SchoolDatesSource(
            name=config.source_name,
            slug=config.school_slug,
            url=config.source_url,
            fetched_at=fetched_at,
            etag=etag,
            last_modified=last_modified,
            content_hash=content_hash,
        ),
        academic_years=years,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SchoolDatesRefresher:
    """
    Runs the fetch -> build -> compare -> validate -> commit pipeline.

    Steps run sequentially; the store is read once and written at most
    once. Concurrent refreshes for the same school are not locked against
    each other (last write wins, and equal content hashes equal content).
    """

    def __init__(
        self,
        config: SchoolConfig,
        store: KeyValueStore,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        now: Optional[Callable[[], datetime]] = None,
        log: Optional[Any] = None,
    ):
        """
        Initialize refresher.

        Args:
            config: Validated school configuration
            store: Key-value store holding the latest document
            transport: Optional httpx transport for the fetch
            now: Clock, defaults to UTC now
            log: Bound structlog logger used as the logging sink
        """
        self.config = config
        self.store = store
        self.transport = transport
        self.now = now or _utc_now
        self.logger = log or logger.bind(school=config.school_slug)

    async def refresh(self) -> RefreshResult:
        """
        Refresh the stored document for the configured school.

        Returns:
            RefreshResult; the stored document when nothing changed

        Raises:
            ConfigurationError: Source URL or slug missing
            FetchError: Source page returned non-2xx
            ParseError: A date could not be resolved
            ValidationFailedError: The new document is invalid (nothing written)
        """
        self._check_config()
        fetched_at = _isoformat(self.now())

        user_agent = USER_AGENT.format(version=__version__, slug=self.config.school_slug)
        async with HttpClient(
            timeout=self.config.timeout,
            user_agent=user_agent,
            transport=self.transport,
        ) as client:
            page = await client.fetch(self.config.source_url)

        document = build_document(
            page.text,
            fetched_at,
            self.config,
            etag=page.etag,
            last_modified=page.last_modified,
        )
        return await self.commit(document)

    async def commit(self, document: SchoolDatesDocument) -> RefreshResult:
        """
        Store the document unless its content hash matches the stored one.

        Raises:
            ValidationFailedError: The document is invalid (nothing written)
        """
        key = school_dates_key(self.config.school_slug)
        content_hash = document.source.content_hash or ""

        existing_data = await self.store.get_json(key)
        existing_hash = ((existing_data or {}).get("source") or {}).get("contentHash")
        if existing_data is not None and existing_hash == content_hash:
            existing = SchoolDatesDocument.from_dict(existing_data)
            self.logger.info(
                "refresh_unchanged",
                academic_years=len(existing.academic_years),
                items=existing.item_count,
                content_hash=content_hash,
            )
            return self._result(False, existing, document.source.fetched_at, content_hash)

        errors = validate_document(document)
        if errors:
            self.logger.error("validation_failed", errors=errors)
            raise ValidationFailedError(errors)

        await self.store.put(key, document_json(document))
        self.logger.info(
            "refresh_updated",
            academic_years=len(document.academic_years),
            items=document.item_count,
            content_hash=content_hash,
        )
        return self._result(True, document, document.source.fetched_at, content_hash)

    def _check_config(self) -> None:
        if not (self.config.source_url or "").strip():
            raise ConfigurationError("source_url")
        if not (self.config.school_slug or "").strip():
            raise ConfigurationError("school_slug")

    def _result(
        self,
        updated: bool,
        document: SchoolDatesDocument,
        fetched_at: str,
        content_hash: str,
    ) -> RefreshResult:
        return RefreshResult(
            updated=updated,
            school=self.config.school_slug,
            fetched_at=fetched_at,
            items=document.item_count,
            academic_years=len(document.academic_years),
            content_hash=content_hash,
            document=document,
        )


def document_json(document: SchoolDatesDocument) -> str:
    return json.dumps(document.to_dict(), ensure_ascii=False)


async def refresh_school_dates(
    config: SchoolConfig,
    store: KeyValueStore,
    **kwargs,
) -> RefreshResult:
    """
    Convenience function to run one refresh.

    Args:
        config: School configuration
        store: Key-value store
        **kwargs: Additional arguments for SchoolDatesRefresher

    Returns:
        RefreshResult
    """
    refresher = SchoolDatesRefresher(config=config, store=store, **kwargs)
    return await refresher.refresh()

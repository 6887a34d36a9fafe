"""BaseService — foundation for all blogctl services.

Every service receives a :class:`Site` at construction time. The Site
resolves collections, the author registry, and turns sources into
Documents; services decide what to do with them.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from blogctl.infrastructure.site import Document, DocumentError

if TYPE_CHECKING:
    from blogctl.infrastructure.site import Site

logger = structlog.get_logger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class BuildService(BaseService):
            def build(self, ...) -> ServiceResult:
                docs, errors = self._load_documents(include_drafts=True)
                ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site

    def _load_documents(
        self,
        *,
        include_drafts: bool = False,
        now: datetime | None = None,
    ) -> tuple[list[Document], list[DocumentError]]:
        """Load every source, collecting failures instead of stopping."""
        documents: list[Document] = []
        errors: list[DocumentError] = []
        for source in self._site.sources(include_drafts=include_drafts):
            try:
                documents.append(self._site.load(source, now=now))
            except DocumentError as exc:
                logger.debug("document.invalid", path=str(exc.path), reason=exc.reason)
                errors.append(exc)
        return documents, errors


def newest_first(documents: list[Document]) -> list[Document]:
    """Posts sorted by date descending, slug as the tie-breaker."""
    posts = [d for d in documents if d.is_post]
    return sorted(posts, key=lambda d: (d.date or datetime.min, d.slug), reverse=True)

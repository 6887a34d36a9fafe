"""SEO and social meta tags for the document head."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from blogctl.domain.pages import HOME_TEMPLATE, POST_TEMPLATE


@dataclass(frozen=True)
class SiteIdentity:
    """The site-wide values every page's tags fall back to."""

    title: str
    description: str = ""
    url: str = ""
    baseurl: str = ""
    cover: str | None = None

    def absolute(self, path: str) -> str:
        """Join a site-relative path onto the site URL and baseurl."""
        if path.startswith(("http://", "https://", "//")):
            return path
        base = self.url.rstrip("/") + "/" + self.baseurl.strip("/")
        return base.rstrip("/") + "/" + path.lstrip("/")


@dataclass(frozen=True)
class SeoTags:
    title: str
    description: str
    canonical_url: str
    og_type: str
    image: str | None = None
    twitter_card: str = "summary"
    published_time: str | None = None
    tags: list[str] = field(default_factory=list)
    author: str | None = None


def build_seo(
    site: SiteIdentity,
    *,
    title: str | None,
    url: str,
    page_class: str | None,
    excerpt: str | None = None,
    cover: str | None = None,
    date: datetime | None = None,
    tags: list[str] | None = None,
    author: str | None = None,
) -> SeoTags:
    """Compute the meta tags for one rendered page.

    The home page uses the bare site title; every other page is
    ``"{title} | {site}"``. Posts are ``og:type=article`` and carry their
    publish time and tags.
    """
    if page_class == HOME_TEMPLATE or not title:
        full_title = site.title
    else:
        full_title = f"{title} | {site.title}"

    image_path = cover or site.cover
    image = site.absolute(image_path) if image_path else None
    is_article = page_class == POST_TEMPLATE

    return SeoTags(
        title=full_title,
        description=(excerpt or site.description).strip(),
        canonical_url=site.absolute(url),
        og_type="article" if is_article else "website",
        image=image,
        twitter_card="summary_large_image" if image else "summary",
        published_time=date.isoformat() if (is_article and date) else None,
        tags=list(tags or []) if is_article else [],
        author=author,
    )

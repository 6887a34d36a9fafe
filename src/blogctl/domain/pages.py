"""Page classes, pagination dispatch, and script bundles.

The page shell template renders one document shape for every page and
varies only by the ``page.class`` discriminator. Everything that depends
on it is a pure function here so the shell stays declarative.
"""

from __future__ import annotations

HOME_TEMPLATE = "home-template"
POST_TEMPLATE = "post-template"
PAGE_TEMPLATE = "page-template"
TAG_TEMPLATE = "tag-template"
AUTHOR_TEMPLATE = "author-template"

PAGE_CLASSES: frozenset[str] = frozenset(
    {HOME_TEMPLATE, POST_TEMPLATE, PAGE_TEMPLATE, TAG_TEMPLATE, AUTHOR_TEMPLATE}
)

ARCHIVE_CLASSES: frozenset[str] = frozenset({HOME_TEMPLATE, TAG_TEMPLATE, AUTHOR_TEMPLATE})

PAGINATION_HOME = "partials/pagination/home.html"
PAGINATION_AUTHOR = "partials/pagination/author.html"
PAGINATION_TAG = "partials/pagination/tag.html"
PAGINATION_DEFAULT = "partials/pagination/default.html"

_PAGINATION_BY_CLASS: dict[str, str] = {
    HOME_TEMPLATE: PAGINATION_HOME,
    PAGE_TEMPLATE: PAGINATION_HOME,
    AUTHOR_TEMPLATE: PAGINATION_AUTHOR,
    TAG_TEMPLATE: PAGINATION_TAG,
}

PAGINATION_PARTIALS: tuple[str, ...] = (
    PAGINATION_HOME,
    PAGINATION_AUTHOR,
    PAGINATION_TAG,
    PAGINATION_DEFAULT,
)


def pagination_partial(page_class: str | None) -> str:
    """Select the pagination partial for a page class.

    Unmatched values (including ``None``) fall through to the default
    partial, so every page renders some pagination.

    Examples:
        >>> pagination_partial("tag-template")
        'partials/pagination/tag.html'
        >>> pagination_partial("post-template")
        'partials/pagination/default.html'
    """
    if page_class is None:
        return PAGINATION_DEFAULT
    return _PAGINATION_BY_CLASS.get(page_class, PAGINATION_DEFAULT)


def is_known_page_class(value: str | None) -> bool:
    return value in PAGE_CLASSES


def script_bundles(page_class: str | None, *, math: bool = False) -> list[str]:
    """Names of the script bundles a page loads, in emission order.

    Every page loads ``site``. Posts and pages add ``post``; archive
    listings add ``archive``. ``math`` is appended only when requested.
    """
    bundles = ["site"]
    if page_class in (POST_TEMPLATE, PAGE_TEMPLATE):
        bundles.append("post")
    elif page_class in ARCHIVE_CLASSES:
        bundles.append("archive")
    if math:
        bundles.append("math")
    return bundles

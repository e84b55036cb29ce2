"""Slug generation shared by the importer and the tech catalogue."""

import re

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def generate_slug(label: str) -> str:
    """Turn a display label into a URL-safe slug.

    Lower-cases, collapses every run of characters outside ``[a-z0-9]``
    into one hyphen, then trims hyphens from both ends.

    >>> generate_slug("Next.js")
    'next-js'
    >>> generate_slug("  C++ ")
    'c'
    """
    return _NON_SLUG_RUN.sub("-", label.lower()).strip("-")


def effective_slug(label: str, slug: str) -> str:
    """Return the explicit slug when given, else the slug generated from ``label``."""
    return slug.strip() or generate_slug(label.strip())

"""
Request-side helpers: access the app's CatalogService and turn ids from a
payload into entities before calling it. The service never sees raw ids for
references.
"""
from __future__ import annotations

from typing import List

from flask import abort, current_app

from models import Author, CatalogService, Category, Publisher


def get_catalog() -> CatalogService:
    return current_app.extensions["catalog"]


def get_or_404(finder, entity_id: int, label: str):
    entity = finder(entity_id)
    if entity is None:
        abort(404, description=f"{label} {entity_id} not found")
    return entity


def resolve_publisher(publisher_id: int | None) -> Publisher | None:
    if publisher_id is None:
        return None
    return get_or_404(get_catalog().find_publisher_by_id, publisher_id, "Publisher")


def resolve_category(category_id: int | None) -> Category | None:
    if category_id is None:
        return None
    return get_or_404(get_catalog().find_category_by_id, category_id, "Category")


def resolve_authors(author_ids: List[int]) -> List[Author]:
    catalog = get_catalog()
    return [get_or_404(catalog.find_author_by_id, author_id, "Author") for author_id in author_ids]

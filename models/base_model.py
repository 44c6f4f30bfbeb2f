#!/usr/bin/env python3
"""
Shared base for the catalog entities.

Goals:
- integer id assigned by the CatalogService (never by the entity itself)
- kwargs initialization so records rebuilt from storage and fresh entities
  go through the same constructor
- readable __str__/__repr__ for logs and debugging

Notes:
- Entities hold no reference to storage; the service persists them.
- Identity is object identity: two Author instances with the same fields are
  still different entities. Lookups go through ids.
"""

from __future__ import annotations


class BaseModel:
    """Base for all catalog entities."""

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs.
        `id` is required; everything else is optional at this level and
        enforced by the service before the entity is stored.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        if getattr(self, "id", None) is None:
            raise ValueError(f"{self.__class__.__name__} requires an id")

    def __str__(self) -> str:
        """Human-friendly representation including id and fields."""
        fields = {k: v for k, v in self.__dict__.items() if k != "id"}
        return f"[{self.__class__.__name__}] ({self.id}) {fields}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"


class NamedModel(BaseModel):
    """Entities whose name is unique (case-insensitive) within their kind."""

    name: str

    def has_name(self, name: str) -> bool:
        return self.name.lower() == name.lower()

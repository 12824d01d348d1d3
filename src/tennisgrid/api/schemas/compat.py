from __future__ import annotations

from typing import List

from pydantic import BaseModel

from tennisgrid.models import CategoryMetadata


class RebuildResponse(BaseModel):
    pairs_checked: int
    valid_pairs: int
    completed: bool
    category_metadata: List[CategoryMetadata]


class MetadataResponse(BaseModel):
    categories: int
    pairs: int
    valid_pairs: int
    built_at: str | None = None
    category_metadata: List[CategoryMetadata]

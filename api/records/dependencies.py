"""
Dependency wiring for the generic record accessor.
"""

from __future__ import annotations

from fastapi import Depends

from core import db

from .accessor import RecordAccessor


async def get_accessor(store: db.Store = Depends(db.get_store)) -> RecordAccessor:
    return RecordAccessor(store)

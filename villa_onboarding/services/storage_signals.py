"""Counts reported by the binary storage collaborator."""

from typing import Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from villa_onboarding.database.models import VillaDocument
from villa_onboarding.repositories.villa_repository import VillaChildRepository


class StorageSignals(Protocol):
    """What completion needs to know about stored files."""

    async def active_document_count(self, villa_id: UUID) -> int:
        ...


class DatabaseStorageSignals:
    """Counts active document records in the database."""

    def __init__(self, session: AsyncSession):
        self.repository = VillaChildRepository(session, VillaDocument)

    async def active_document_count(self, villa_id: UUID) -> int:
        return await self.repository.count_for_villa(villa_id, is_active=True)

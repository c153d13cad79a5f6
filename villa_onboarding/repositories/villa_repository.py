"""Repositories for the villa record and the tables hanging off it."""

from typing import List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from villa_onboarding.database.models import (
    BankDetails,
    ContractualDetails,
    FacilityChecklist,
    OtaCredential,
    Owner,
    Photo,
    Staff,
    Villa,
    VillaDocument,
)
from villa_onboarding.repositories.base_repository import BaseRepository

ChildType = TypeVar("ChildType")


class VillaRepository(BaseRepository[Villa]):
    """Repository for the villa record."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Villa)


class VillaChildRepository(BaseRepository[ChildType]):
    """Repository for a table keyed by villa_id (1:1 bundles and collections)."""

    def __init__(self, session: AsyncSession, model: Type[ChildType]):
        super().__init__(session, model)

    async def get_by_villa_id(self, villa_id: UUID) -> Optional[ChildType]:
        """Get the single row for a villa (1:1 bundles)."""
        try:
            query = select(self.model).where(self.model.villa_id == villa_id)
            result = await self.session.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving {self.model.__name__} for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def list_by_villa_id(self, villa_id: UUID) -> List[ChildType]:
        """Get every row for a villa, active or not, oldest first."""
        try:
            query = (
                select(self.model)
                .where(self.model.villa_id == villa_id)
                .order_by(self.model.created_at, self.model.id)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error listing {self.model.__name__} for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise

    async def count_for_villa(self, villa_id: UUID, **filters) -> int:
        try:
            query = select(func.count()).select_from(self.model).where(
                self.model.villa_id == villa_id
            )
            query = self._apply_filters(query, filters)
            result = await self.session.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error counting {self.model.__name__} for villa {villa_id}: {str(e)}",
                exc_info=True
            )
            raise


# Model backing each scalar stage bundle stored outside the villa row
SCALAR_STAGE_MODELS = {
    2: Owner,
    3: ContractualDetails,
    4: BankDetails,
}

# Model backing each collection stage
COLLECTION_MODELS = {
    "platforms": OtaCredential,
    "documents": VillaDocument,
    "staff": Staff,
    "facilities": FacilityChecklist,
    "photos": Photo,
}

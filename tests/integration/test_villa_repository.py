"""Integration tests for villa-scoped repository queries."""

import pytest

from villa_onboarding.database.models import Staff
from villa_onboarding.repositories.villa_repository import VillaChildRepository
from villa_onboarding.services.onboarding_service import OnboardingService

pytestmark = pytest.mark.integration


class TestCountForVilla:

    @pytest.mark.asyncio
    async def test_filters_narrow_the_count(self, session_maker, villa_id):
        a = {"firstName": "Made", "lastName": "Wirawan", "phone": "1", "email": "made@example.com"}
        b = {"firstName": "Ketut", "lastName": "Sari", "phone": "2", "email": "ketut@example.com"}
        async with session_maker() as session:
            service = OnboardingService(session)
            await service.submit_stage(villa_id, 7, {"staff": [a, b]})
            await service.submit_stage(villa_id, 7, {"staff": [a]})

        async with session_maker() as session:
            repository = VillaChildRepository(session, Staff)
            total = await repository.count_for_villa(villa_id)
            active = await repository.count_for_villa(villa_id, is_active=True)
            inactive = await repository.count_for_villa(villa_id, is_active=False)

        assert (total, active, inactive) == (2, 1, 1)

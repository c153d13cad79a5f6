"""Unit tests for natural keys and entity preparation."""

from unittest.mock import MagicMock

import pytest

from villa_onboarding.contracts.validation import validate_step_payload
from villa_onboarding.services.stage_persister import (
    StagePersister,
    natural_key,
    raw_natural_key,
)


class TestNaturalKey:
    """Tests for the identity used to match collection entities."""

    def test_platform_key_is_case_insensitive(self):
        assert natural_key("platforms", {"platform": "airbnb"}) == natural_key(
            "platforms", {"platform": "AIRBNB"}
        )

    def test_staff_prefers_email(self):
        key = natural_key(
            "staff", {"email": "Made@Example.com", "first_name": "Made", "last_name": "W"}
        )

        assert key == ("email", "made@example.com")

    def test_staff_falls_back_to_name(self):
        assert natural_key("staff", {"first_name": "Made", "last_name": "Wirawan"}) == (
            "name",
            "made",
            "wirawan",
        )

    def test_facility_key(self):
        assert natural_key("facilities", {"category": "Kitchen", "item_name": "Oven"}) == (
            "facility",
            "Kitchen",
            "Oven",
        )

    def test_photo_prefers_filename_over_url(self):
        assert natural_key("photos", {"filename": "pool.jpg", "url": "https://x/pool.jpg"}) == (
            "filename",
            "pool.jpg",
        )
        assert natural_key("photos", {"url": "https://x/pool.jpg"}) == ("url", "https://x/pool.jpg")

    def test_entity_without_key(self):
        assert natural_key("facilities", {"category": "Kitchen"}) is None

    def test_raw_key_reads_alias_names(self):
        assert raw_natural_key("documents", {"documentType": "CONTRACT", "filename": "c.pdf"}) == (
            "document",
            "CONTRACT",
            "c.pdf",
        )


class TestPrepare:
    """Tests for per-entity validation ahead of the write."""

    @pytest.fixture
    def persister(self) -> StagePersister:
        return StagePersister(MagicMock())

    def test_bad_entities_are_isolated(self, persister):
        validated = validate_step_payload(
            7,
            {
                "staff": [
                    {"firstName": "Made", "lastName": "Wirawan", "phone": "+62 811"},
                    {"firstName": "Ketut", "lastName": "Sari"},
                ]
            },
        )

        prepared = persister.prepare(validated)

        assert prepared.collection == "staff"
        assert len(prepared.entities) == 1
        assert prepared.failed == 1
        assert prepared.errors == ["staff[1].phone: phone is required"]
        assert prepared.failed_keys == [("name", "ketut", "sari")]
        assert prepared.replaces_collection is True

    def test_non_object_entry_fails_alone(self, persister):
        validated = validate_step_payload(
            7,
            {"staff": ["oops", {"firstName": "Made", "lastName": "Wirawan", "phone": "+62 811"}]},
        )

        prepared = persister.prepare(validated)

        assert len(prepared.entities) == 1
        assert prepared.entities[0]["first_name"] == "Made"
        assert prepared.failed == 1
        assert prepared.errors == ["staff[0]: must be an object"]
        assert prepared.failed_keys == []

    def test_absent_collection_does_not_replace(self, persister):
        prepared = persister.prepare(validate_step_payload(8, {}))

        assert prepared.collection is None
        assert prepared.replaces_collection is False

    def test_null_collection_does_not_replace(self, persister):
        prepared = persister.prepare(validate_step_payload(8, {"facilities": None}))

        assert prepared.replaces_collection is False

    def test_empty_collection_replaces(self, persister):
        prepared = persister.prepare(validate_step_payload(5, {"platforms": []}))

        assert prepared.replaces_collection is True
        assert prepared.entities == []

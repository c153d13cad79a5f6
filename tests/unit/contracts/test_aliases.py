"""Unit tests for alias canonicalization."""

import pytest

from villa_onboarding.contracts.aliases import (
    STEP_FIELD_ALIASES,
    canonicalize_entity,
    canonicalize_step_data,
)


class TestCanonicalizeStepData:
    """Tests for stage payload canonicalization."""

    def test_alias_is_mapped_to_canonical_name(self):
        result = canonicalize_step_data(1, {"name": "Villa Serenity", "villaCity": "Ubud"})

        assert result == {"villaName": "Villa Serenity", "city": "Ubud"}

    def test_canonical_name_wins_over_alias(self):
        result = canonicalize_step_data(1, {"name": "Alias", "villaName": "Canonical"})

        assert result == {"villaName": "Canonical"}

    def test_first_alias_in_priority_order_wins(self):
        """zipCode aliases are villaPostalCode, postalCode, zip in that order."""
        result = canonicalize_step_data(
            1, {"zip": "3", "postalCode": "2", "villaPostalCode": "1"}
        )

        assert result == {"zipCode": "1"}

    def test_present_none_still_wins(self):
        result = canonicalize_step_data(2, {"firstName": None, "ownerFirstName": "Ayu"})

        assert result == {"firstName": None}

    def test_unknown_keys_pass_through(self):
        result = canonicalize_step_data(4, {"bankName": "BCA", "legacyField": 1})

        assert result == {"bankName": "BCA", "legacyField": 1}

    @pytest.mark.parametrize("payload", [None, "villa", 42, ["villaName"]])
    def test_non_mapping_yields_empty_dict(self, payload):
        assert canonicalize_step_data(1, payload) == {}

    @pytest.mark.parametrize("step", sorted(STEP_FIELD_ALIASES))
    def test_canonicalization_is_idempotent(self, step):
        payload = {}
        for field, aliases in STEP_FIELD_ALIASES[step].items():
            payload[aliases[-1] if aliases else field] = f"value-{field}"
        payload["somethingElse"] = "kept"

        once = canonicalize_step_data(step, payload)

        assert canonicalize_step_data(step, once) == once

    def test_input_is_not_mutated(self):
        payload = {"ownerEmail": "owner@example.com"}

        canonicalize_step_data(2, payload)

        assert payload == {"ownerEmail": "owner@example.com"}


class TestCanonicalizeEntity:
    """Tests for entity-level aliases inside collections."""

    def test_staff_aliases(self):
        result = canonicalize_entity(
            "staff",
            {"firstName": "Made", "baseSalary": 500, "idCard": "ID-1", "workInsurance": True},
        )

        assert result == {
            "firstName": "Made",
            "salary": 500,
            "idNumber": "ID-1",
            "hasWorkInsurance": True,
        }

    def test_document_type_alias(self):
        assert canonicalize_entity("documents", {"documentType": "CONTRACT"}) == {
            "type": "CONTRACT"
        }

    def test_facility_available_alias(self):
        assert canonicalize_entity("facilities", {"available": False}) == {"isAvailable": False}

"""Unit tests for two-mode stage validation."""

from datetime import datetime, timezone

import pytest

from villa_onboarding.contracts.aliases import REQUIRED_FIELDS_BY_STEP
from villa_onboarding.contracts.stages import ONBOARDING_STEPS
from villa_onboarding.contracts.validation import (
    entity_defaults,
    validate_entity,
    validate_step_payload,
)
from villa_onboarding.core.exceptions import ValidationError


class TestPartialMode:
    """Drafts and auto-saves validate without required fields."""

    @pytest.mark.parametrize("step", ONBOARDING_STEPS)
    def test_empty_payload_is_accepted_for_every_step(self, step):
        validated = validate_step_payload(step, {})

        assert validated.step == step
        assert validated.values == {}
        assert validated.skipped is False

    def test_present_invalid_value_is_still_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_step_payload(2, {"email": "not-an-email"})

        assert [error.field for error in exc_info.value.errors] == ["email"]

    def test_absent_and_explicit_none_are_distinguished(self):
        validated = validate_step_payload(1, {"city": None})

        assert validated.values == {"city": None}

    def test_explicit_none_on_length_limited_field(self):
        validated = validate_step_payload(2, {"nationality": None})

        assert validated.values == {"nationality": None}

    def test_whitespace_on_length_limited_field_becomes_none(self):
        validated = validate_step_payload(1, {"city": "   ", "description": "  "})

        assert validated.values == {"city": None, "description": None}

    def test_overlong_value_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_step_payload(1, {"zipCode": "9" * 31})

        assert [error.field for error in exc_info.value.errors] == ["zipCode"]

    def test_unknown_fields_are_dropped(self):
        validated = validate_step_payload(4, {"bankName": "BCA", "favouriteColour": "blue"})

        assert validated.values == {"bank_name": "BCA"}
        assert validated.unknown_fields == ["favouriteColour"]


class TestCompleteMode:
    """Final submits enforce each stage's required fields."""

    @pytest.mark.parametrize("step", sorted(REQUIRED_FIELDS_BY_STEP))
    def test_empty_payload_yields_one_error_per_required_field(self, step):
        with pytest.raises(ValidationError) as exc_info:
            validate_step_payload(step, {}, enforce_required=True)

        fields = [error.field for error in exc_info.value.errors]
        assert sorted(fields) == sorted(REQUIRED_FIELDS_BY_STEP[step])

    @pytest.mark.parametrize("step", [5, 6, 7, 8, 9, 10])
    def test_steps_without_required_fields_accept_empty_payload(self, step):
        validated = validate_step_payload(step, {}, enforce_required=True)

        assert validated.values == {}

    def test_invalid_and_missing_fields_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_step_payload(
                4,
                {"accountHolderName": "Ayu", "bankName": "   ", "swiftCode": "X" * 20},
                enforce_required=True,
            )

        fields = sorted(error.field for error in exc_info.value.errors)
        assert fields == ["accountNumber", "bankName", "swiftCode"]

    def test_empty_required_string_is_reported_as_missing(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_step_payload(4, {"bankName": ""}, enforce_required=True)

        fields = [error.field for error in exc_info.value.errors]
        assert fields.count("bankName") == 1
        assert sorted(fields) == ["accountHolderName", "accountNumber", "bankName"]

    def test_invalid_required_field_is_reported_once(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_step_payload(2, {"email": "broken"}, enforce_required=True)

        fields = [error.field for error in exc_info.value.errors]
        assert fields.count("email") == 1
        assert "received 'broken'" in next(
            error.message for error in exc_info.value.errors if error.field == "email"
        )


class TestCoercion:
    """Scalar coercions applied in both modes."""

    def test_numbers_enums_and_coordinates(self):
        validated = validate_step_payload(
            1,
            {
                "bedrooms": "4",
                "propertySize": "120.5",
                "propertyType": "villa",
                "googleCoordinates": "-8.6478, 115.1385",
            },
        )

        assert validated.values["bedrooms"] == 4
        assert validated.values["property_size"] == 120.5
        assert validated.values["property_type"] == "VILLA"
        assert validated.values["latitude"] == pytest.approx(-8.6478)
        assert validated.values["longitude"] == pytest.approx(115.1385)

    def test_blank_strings_become_none(self):
        validated = validate_step_payload(1, {"address": "   ", "bedrooms": ""})

        assert validated.values == {"address": None, "bedrooms": None}

    def test_url_gets_scheme(self):
        validated = validate_step_payload(1, {"propertyWebsite": "villa-serenity.com"})

        assert validated.values["property_website"] == "https://villa-serenity.com"

    def test_boolean_strings(self):
        validated = validate_step_payload(10, {"agreedToTerms": "true", "dataAccuracyConfirmed": "0"})

        assert validated.values == {"agreed_to_terms": True, "data_accuracy_confirmed": False}

    def test_dates_are_parsed_to_aware_datetimes(self):
        validated = validate_step_payload(3, {"contractStartDate": "2024-03-01"})

        assert validated.values["contract_start_date"] == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_out_of_range_epoch_is_a_field_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_step_payload(3, {"contractStartDate": 10**20})

        assert [error.field for error in exc_info.value.errors] == ["contractStartDate"]

    def test_ipl_flag_explicit_alias(self):
        validated = validate_step_payload(3, {"paymentThroughIPL": "yes"})

        assert validated.values == {"payment_through_ipl": True}

    def test_non_finite_number_rejected(self):
        with pytest.raises(ValidationError):
            validate_step_payload(3, {"commissionRate": "NaN"})

    def test_skipped_flag_is_separated_from_values(self):
        validated = validate_step_payload(5, {"skipped": True})

        assert validated.skipped is True
        assert "skipped" not in validated.values

    def test_defaults_only_for_null_fields(self):
        validated = validate_step_payload(4, {"currency": "EUR"})

        assert "currency" not in validated.defaults
        assert validated.defaults["is_verified"] is False


class TestEntityValidation:
    """Per-entity validation inside collection stages."""

    def test_staff_requires_name_and_phone(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entity("staff", {"firstName": "Made"}, prefix="staff[0].")

        fields = sorted(error.field for error in exc_info.value.errors)
        assert fields == ["staff[0].lastName", "staff[0].phone"]

    def test_staff_aliases_and_defaults(self):
        values = validate_entity(
            "staff",
            {"firstName": "Made", "lastName": "Wirawan", "phone": "+62 811", "baseSalary": "450",
             "position": "chef"},
        )

        assert values["salary"] == 450
        assert values["position"] == "CHEF"
        defaults = entity_defaults("staff", values)
        assert defaults["department"] == "HOSPITALITY"
        assert defaults["employment_type"] == "FULL_TIME"
        assert defaults["is_active"] is True

    def test_facility_quantity_and_condition_are_normalized(self):
        values = validate_entity(
            "facilities",
            {"category": "Kitchen", "itemName": "Oven", "quantity": 0, "condition": "Excellent"},
        )

        assert values["quantity"] == 1
        assert values["condition"] == "good"

    def test_photo_order_maps_to_sort_order(self):
        values = validate_entity("photos", {"filename": "pool.jpg", "order": 3})

        assert values["sort_order"] == 3
        assert "order" not in values

    def test_non_mapping_entity_rejected(self):
        with pytest.raises(ValidationError):
            validate_entity("platforms", "AIRBNB", prefix="platforms[0].")

    def test_malformed_entry_does_not_reject_the_stage(self):
        validated = validate_step_payload(
            7,
            {"staff": ["oops", {"firstName": "Made", "lastName": "Wirawan", "phone": "+62 811"}]},
        )

        assert validated.values["staff"][0] == "oops"
        assert len(validated.values["staff"]) == 2

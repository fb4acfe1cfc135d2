"""
Tests for the contact submission validation gate.
"""
import pytest

from showcase.core.errors import ContactValidationError
from showcase.db.models import ContactMethod, InquiryType
from showcase.schemas.contact import validate_contact


def _errors_for(payload: dict) -> dict:
    with pytest.raises(ContactValidationError) as exc_info:
        validate_contact(payload)
    return {e["field"]: e["message"] for e in exc_info.value.errors}


class TestValidSubmission:
    """Tests for submissions that pass every constraint."""

    def test_minimal_submission(self, valid_payload):
        """The reference submission validates into typed fields."""
        submission = validate_contact(valid_payload)

        assert submission.name == "John Doe"
        assert submission.email == "john@example.com"
        assert submission.inquiry_type is InquiryType.GENERAL_INQUIRY
        assert submission.contact_method is ContactMethod.EMAIL
        assert submission.company is None
        assert submission.phone is None
        assert submission.product is None

    def test_full_submission(self, valid_payload):
        """Optional fields are kept as given."""
        valid_payload.update(
            company="Acme Corp",
            phone="+1 555 0100",
            product="lms",
            inquiryType="REQUEST_DEMO",
            contactMethod="EITHER",
        )

        submission = validate_contact(valid_payload)

        assert submission.company == "Acme Corp"
        assert submission.phone == "+1 555 0100"
        assert submission.product == "lms"
        assert submission.inquiry_type is InquiryType.REQUEST_DEMO
        assert submission.contact_method is ContactMethod.EITHER

    @pytest.mark.parametrize("field", ["company", "phone", "product"])
    def test_empty_optional_field_is_absent(self, valid_payload, field):
        """An empty optional string normalizes to None instead of failing."""
        valid_payload[field] = ""

        submission = validate_contact(valid_payload)

        assert getattr(submission, field) is None

    def test_name_minimum_boundary(self, valid_payload):
        """Two characters is the inclusive minimum for name."""
        valid_payload["name"] = "Jo"

        assert validate_contact(valid_payload).name == "Jo"

    def test_length_upper_boundaries(self, valid_payload):
        """Values at each maximum length are accepted."""
        valid_payload.update(
            name="n" * 100,
            company="c" * 200,
            phone="1" * 20,
            product="p" * 100,
            message="m" * 5000,
        )

        submission = validate_contact(valid_payload)

        assert len(submission.message) == 5000

    def test_unknown_keys_ignored(self, valid_payload):
        """Extra keys in the payload do not cause failures."""
        valid_payload["utm_campaign"] = "spring"

        submission = validate_contact(valid_payload)

        assert not hasattr(submission, "utm_campaign")


class TestFieldConstraints:
    """Tests for individual constraint violations."""

    def test_name_too_short(self, valid_payload):
        valid_payload["name"] = "J"

        errors = _errors_for(valid_payload)

        assert errors == {"name": "Name must be at least 2 characters"}

    def test_name_too_long(self, valid_payload):
        valid_payload["name"] = "n" * 101

        errors = _errors_for(valid_payload)

        assert errors["name"] == "Name must be less than 100 characters"

    def test_message_too_short(self, valid_payload):
        valid_payload["message"] = "Too short"

        errors = _errors_for(valid_payload)

        assert errors["message"] == "Message must be at least 10 characters"

    def test_message_too_long(self, valid_payload):
        valid_payload["message"] = "m" * 5001

        errors = _errors_for(valid_payload)

        assert errors["message"] == "Message must be less than 5000 characters"

    @pytest.mark.parametrize("email", ["not-an-email", "john@", "@example.com", "John <john@example.com>"])
    def test_invalid_email(self, valid_payload, email):
        valid_payload["email"] = email

        errors = _errors_for(valid_payload)

        assert errors["email"] == "Invalid email address"

    def test_email_too_long(self, valid_payload):
        valid_payload["email"] = "a" * 250 + "@example.com"

        errors = _errors_for(valid_payload)

        assert errors["email"] == "Email must be less than 255 characters"

    @pytest.mark.parametrize(
        "field, limit, label",
        [
            ("company", 200, "Company name"),
            ("phone", 20, "Phone number"),
            ("product", 100, "Product name"),
        ],
    )
    def test_optional_field_too_long(self, valid_payload, field, limit, label):
        valid_payload[field] = "x" * (limit + 1)

        errors = _errors_for(valid_payload)

        assert errors[field] == f"{label} must be less than {limit} characters"

    @pytest.mark.parametrize("value", ["SPAM", "general_inquiry", ""])
    def test_invalid_inquiry_type(self, valid_payload, value):
        """Values outside the fixed set always fail, whatever else is valid."""
        valid_payload["inquiryType"] = value

        errors = _errors_for(valid_payload)

        assert list(errors) == ["inquiryType"]
        assert errors["inquiryType"].startswith("Invalid inquiry type")

    @pytest.mark.parametrize("value", ["SMS", "email", "BOTH"])
    def test_invalid_contact_method(self, valid_payload, value):
        valid_payload["contactMethod"] = value

        errors = _errors_for(valid_payload)

        assert list(errors) == ["contactMethod"]
        assert "EMAIL, PHONE, EITHER" in errors["contactMethod"]

    def test_non_string_name(self, valid_payload):
        valid_payload["name"] = 42

        errors = _errors_for(valid_payload)

        assert errors["name"] == "Name must be a string"


class TestAggregation:
    """Tests for wholesale rejection with every violation reported."""

    def test_all_violations_reported(self, valid_payload):
        """Every invalid field appears, not just the first one."""
        valid_payload.update(
            name="J",
            email="nope",
            message="short",
            inquiryType="SPAM",
            contactMethod="FAX",
        )

        errors = _errors_for(valid_payload)

        assert set(errors) == {"name", "email", "message", "inquiryType", "contactMethod"}

    def test_missing_required_fields(self):
        errors = _errors_for({})

        assert errors == {
            "name": "Name is required",
            "email": "Email is required",
            "inquiryType": "Inquiry type is required",
            "message": "Message is required",
            "contactMethod": "Contact method is required",
        }

    def test_message_error_independent_of_other_fields(self, valid_payload):
        """A short message fails even when everything else is valid."""
        valid_payload.update(company="Acme", phone="123", product="lms", message="Hi")

        errors = _errors_for(valid_payload)

        assert list(errors) == ["message"]

    @pytest.mark.parametrize("payload", [None, [], "name=John"])
    def test_non_object_payload(self, payload):
        errors = _errors_for(payload)

        assert errors == {"body": "Request body must be a JSON object"}

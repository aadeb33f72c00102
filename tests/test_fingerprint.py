import pytest

from app.services.fingerprint import (
    generate_fingerprint,
    normalize_email,
    normalize_name,
    normalize_phone,
)


class TestNormalization:

    def test_phone_keeps_last_ten_digits(self):
        assert normalize_phone("+1 (415) 555-0100") == "4155550100"

    def test_phone_is_idempotent(self):
        assert normalize_phone("4155550100") == "4155550100"
        assert normalize_phone(normalize_phone("+1 415 555 0100")) == "4155550100"

    @pytest.mark.parametrize("phone", [None, "", "555-0100", "abc"])
    def test_short_phone_is_absent(self, phone):
        assert normalize_phone(phone) is None

    def test_email_and_name(self):
        assert normalize_email("  Bob@X.COM ") == "bob@x.com"
        assert normalize_name("  Jane \t  DOE ") == "jane doe"
        assert normalize_name(None) == ""


class TestGenerateFingerprint:

    def test_fixed_component_order(self):
        fingerprint = generate_fingerprint(
            name="Jane Doe", phone="415-555-0100", email="jane@example.com"
        )
        assert fingerprint == "email:jane@example.com|phone:4155550100|name:jane doe"

    def test_incidental_whitespace_and_case_ignored(self):
        a = generate_fingerprint(email=" Jane.Doe@Example.com ", phone="+1 (415) 555-0100", name="  Jane   DOE ")
        b = generate_fingerprint(email="jane.doe@example.com", phone="4155550100", name="jane doe")
        assert a == b == "email:jane.doe@example.com|phone:4155550100|name:jane doe"

    def test_short_phone_omitted(self):
        assert generate_fingerprint(email="a@b.co", phone="555-0100") == "email:a@b.co"

    def test_blank_fields_omitted(self):
        assert generate_fingerprint() == ""
        assert generate_fingerprint(email="   ", phone="", name="  ") == ""
        assert generate_fingerprint(name="Alice", phone="4155550100") == "phone:4155550100|name:alice"

    def test_changing_one_field_changes_fingerprint(self):
        base = dict(email="a@b.co", phone="4155550100", name="Alice Smith")
        original = generate_fingerprint(**base)

        for key, value in (("email", "c@d.co"), ("phone", "4155550199"), ("name", "Alice Jones")):
            assert generate_fingerprint(**{**base, key: value}) != original

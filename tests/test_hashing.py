import hashlib

import pytest

from julisha.errors import ValidationError
from julisha.services.hashing import Hasher, hash_value
from julisha.utils import canonical_county, is_valid_hash, normalize_identifier, normalize_phone
from tests.conftest import browser_hash


@pytest.fixture
def hasher():
    return Hasher(server_salt="secret", public_salt="JULISHA_KENYA_2026_PUBLIC_SALT")


class TestHashValue:
    def test_sha256_of_value_then_salt(self):
        expected = hashlib.sha256(b"12345678salt").hexdigest()
        assert hash_value("12345678", "salt") == expected

    def test_is_stable(self):
        assert hash_value("abc", "s") == hash_value("abc", "s")

    def test_salt_changes_digest(self):
        assert hash_value("abc", "s1") != hash_value("abc", "s2")

    def test_digest_is_64_lowercase_hex(self):
        assert is_valid_hash(hash_value("anything", "salt"))


class TestNormalizeIdentifier:
    @pytest.mark.parametrize("raw", ["12345678", "123 456 78", " 1234 5678 ", "1234\t5678"])
    def test_whitespace_variants_collapse(self, raw):
        assert normalize_identifier(raw) == "12345678"

    def test_uppercases_passport_numbers(self):
        assert normalize_identifier("ak 123456") == "AK123456"


class TestNormalizePhone:
    @pytest.mark.parametrize("raw", [
        "0712345678",
        "712345678",
        "254712345678",
        "+254712345678",
        "+254 712 345 678",
        "0712-345-678",
        "(0712) 345.678",
    ])
    def test_renderings_share_canonical_form(self, raw):
        assert normalize_phone(raw) == "+254712345678"

    def test_airtel_prefix_accepted(self):
        assert normalize_phone("0112345678") == "+254112345678"

    @pytest.mark.parametrize("raw", ["", "12345", "0812345678", "+255712345678", "07123456789", "07abc45678"])
    def test_invalid_numbers_rejected(self, raw):
        with pytest.raises(ValidationError):
            normalize_phone(raw)


class TestHasher:
    def test_client_hash_matches_browser(self, hasher):
        assert hasher.client_hash("123 456 78") == browser_hash("12345678")

    def test_client_hash_case_insensitive(self, hasher):
        assert hasher.client_hash("ak123456") == hasher.client_hash("AK123456")

    def test_server_hash_differs_from_client_token(self, hasher):
        token = hasher.client_hash("12345678")
        assert hasher.server_hash(token) != token
        assert hasher.server_hash(token) == hash_value(token, "secret")

    def test_phone_hash_matches_submit_chain(self, hasher):
        submitted = browser_hash("+254712345678")
        assert hasher.phone_hash("0712 345 678") == hasher.server_hash(submitted)

    def test_ip_hash_uses_server_salt(self, hasher):
        other = Hasher(server_salt="other", public_salt=hasher.public_salt)
        assert hasher.ip_hash("10.0.0.1") != other.ip_hash("10.0.0.1")

    def test_empty_server_salt_rejected(self):
        with pytest.raises(ValueError):
            Hasher(server_salt="", public_salt="p")


class TestCounties:
    def test_case_insensitive_lookup(self):
        assert canonical_county("nairobi") == "Nairobi"
        assert canonical_county("  homa   bay ") == "Homa Bay"

    def test_unknown_county(self):
        assert canonical_county("Atlantis") is None
        assert canonical_county("") is None

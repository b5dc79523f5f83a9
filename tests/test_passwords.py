import pytest

from core.db.users.auth import hash_password, verify_password


@pytest.mark.parametrize("pw", ["Secret123", "pässwörd-ünïcode", "a", "x" * 100])
def test_hash_then_verify_round_trip(pw):
    hashed = hash_password(pw, rounds=4)
    assert hashed != pw
    assert verify_password(pw, hashed) is True


def test_wrong_password_is_rejected():
    hashed = hash_password("Secret123", rounds=4)
    assert verify_password("Secret124", hashed) is False
    assert verify_password("secret123", hashed) is False


def test_hash_is_salted():
    assert hash_password("Secret123", rounds=4) != hash_password("Secret123", rounds=4)


def test_cost_is_encoded_in_hash():
    assert hash_password("Secret123", rounds=5).startswith("$2b$05$")


@pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash", "$2b$04$short"])
def test_verify_never_raises_on_bad_stored_value(stored):
    assert verify_password("Secret123", stored) is False


def test_verify_empty_password():
    hashed = hash_password("Secret123", rounds=4)
    assert verify_password("", hashed) is False


def test_long_passwords_sharing_a_prefix_are_distinct():
    hashed = hash_password("a" * 72 + "CorrectTail", rounds=4)
    assert verify_password("a" * 72 + "CorrectTail", hashed) is True
    assert verify_password("a" * 72 + "totally-different", hashed) is False
    assert verify_password("a" * 72, hashed) is False

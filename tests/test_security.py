from budgetpay.core.security import hash_password, normalize_email, verify_password


def test_password_hash_round_trip():
    stored = hash_password("secret1")
    assert stored.startswith("pbkdf2_sha256$")
    assert verify_password("secret1", stored)
    assert not verify_password("secret2", stored)


def test_malformed_hash_never_verifies():
    assert not verify_password("secret1", "plaintext")
    assert not verify_password("secret1", "pbkdf2_sha256$zz$zz")
    assert not verify_password("secret1", "md5$00$00")


def test_normalize_email():
    assert normalize_email("  Someone@Example.COM ") == "someone@example.com"
    assert normalize_email(None) == ""

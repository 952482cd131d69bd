import pytest

from stayreal.services.token_cipher import TokenCipherService


def test_seal_and_open_returns_original_document() -> None:
    cipher = TokenCipherService(secret="super-secret-key")
    document = {"deviceId": "d1", "accessToken": "a1", "refreshToken": "r1"}

    sealed = cipher.seal(document)
    assert "a1" not in sealed

    assert cipher.open(sealed) == document


def test_open_rejects_blob_sealed_with_other_secret() -> None:
    sealed = TokenCipherService(secret="first").seal({"a": 1})

    with pytest.raises(ValueError):
        TokenCipherService(secret="second").open(sealed)


def test_cipher_requires_secret() -> None:
    with pytest.raises(ValueError):
        TokenCipherService(secret="")

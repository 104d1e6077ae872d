"""Tests for at-rest encryption of signing keys."""

import base64

import pytest

from jwtforge.core.errors import DECRYPTION_FAILURE_MESSAGE, DecryptionError, ErrorKind
from jwtforge.core.settings import IdentitySettings
from jwtforge.crypto.cipher import (
    IV_SIZE,
    AtRestCipher,
    current_identity,
    derive_machine_key,
)
from jwtforge.crypto.types import MachineIdentity


class TestDeriveMachineKey:
    """Key derivation from OS identity."""

    def test_key_is_256_bits(self, identity: MachineIdentity) -> None:
        assert len(derive_machine_key(identity)) == 32

    def test_deterministic(self, identity: MachineIdentity) -> None:
        assert derive_machine_key(identity) == derive_machine_key(identity)

    def test_depends_on_user_and_host(self, identity: MachineIdentity) -> None:
        other_user = MachineIdentity(username="bob", hostname=identity.hostname)
        other_host = MachineIdentity(username=identity.username, hostname="laptop")
        key = derive_machine_key(identity)
        assert derive_machine_key(other_user) != key
        assert derive_machine_key(other_host) != key

    def test_overrides_take_precedence(self) -> None:
        settings = IdentitySettings(username="ci", hostname="runner")
        assert current_identity(settings) == MachineIdentity(
            username="ci", hostname="runner"
        )

    def test_rejects_wrong_key_length(self) -> None:
        with pytest.raises(ValueError):
            AtRestCipher(b"short")


class TestRoundTrip:
    """encrypt followed by decrypt returns the plaintext."""

    @pytest.mark.parametrize(
        "plaintext",
        ["", "dGVzdA==", "line one\nline two\n", "ключ-🔑", "x" * 1000],
    )
    def test_roundtrip(self, cipher: AtRestCipher, plaintext: str) -> None:
        assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_roundtrip_pem(self, cipher: AtRestCipher, rsa_private_pem: str) -> None:
        record = cipher.encrypt(rsa_private_pem)
        assert "PRIVATE" not in record
        assert cipher.decrypt(record) == rsa_private_pem

    def test_fresh_iv_each_call(self, cipher: AtRestCipher) -> None:
        first = cipher.encrypt("same secret")
        second = cipher.encrypt("same secret")
        assert first != second
        assert base64.b64decode(first)[:IV_SIZE] != base64.b64decode(second)[:IV_SIZE]

    def test_record_layout(self, cipher: AtRestCipher) -> None:
        raw = base64.b64decode(cipher.encrypt("abc"))
        # 16-byte IV followed by one AES block
        assert len(raw) == IV_SIZE + 16


class TestDecryptFailures:
    """Every decryption failure collapses into one generic error."""

    def test_other_machine(self, cipher: AtRestCipher) -> None:
        record = cipher.encrypt("a" * 40)
        other = AtRestCipher.from_identity(
            MachineIdentity(username="mallory", hostname="elsewhere")
        )
        with pytest.raises(DecryptionError) as info:
            other.decrypt(record)
        assert info.value.kind == ErrorKind.DECRYPTION_FAILURE
        assert str(info.value) == DECRYPTION_FAILURE_MESSAGE

    @pytest.mark.parametrize(
        "record",
        [
            "",
            "not base64 at all!",
            base64.b64encode(b"\x00" * 10).decode(),
            base64.b64encode(b"\x00" * (IV_SIZE + 7)).decode(),
        ],
    )
    def test_corrupt_records(self, cipher: AtRestCipher, record: str) -> None:
        with pytest.raises(DecryptionError) as info:
            cipher.decrypt(record)
        assert str(info.value) == DECRYPTION_FAILURE_MESSAGE

    def test_truncated_record(self, cipher: AtRestCipher) -> None:
        raw = base64.b64decode(cipher.encrypt("secret value"))
        with pytest.raises(DecryptionError):
            cipher.decrypt(base64.b64encode(raw[:-3]).decode())

    def test_cause_is_hidden(self, cipher: AtRestCipher) -> None:
        with pytest.raises(DecryptionError) as info:
            cipher.decrypt("garbage")
        assert info.value.__cause__ is None
        assert info.value.__suppress_context__ is True

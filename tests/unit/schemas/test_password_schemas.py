"""
Tests for the password wire schemas.
"""
import pytest
from pydantic import ValidationError

from twostep.crypto.derivations import (
    PBKDF2SecurePasswordDerivation,
    SHA512SecurePasswordDerivation,
    SRPPasswordDerivation,
    SRPProof,
    UnknownPasswordDerivation,
    UnknownSecurePasswordDerivation,
)
from twostep.schemas.password import (
    PASSWORD_KDF_SRP,
    SECURE_KDF_PBKDF2,
    SECURE_KDF_SHA512,
    CheckPasswordSRPRequest,
    PasswordConfiguration,
    PasswordInputSettings,
    PasswordKdfAlgo,
    SecurePasswordKdfAlgo,
    validate_hex_string,
)


@pytest.fixture
def srp_algo_data(srp_derivation) -> dict:
    return {
        "type": PASSWORD_KDF_SRP,
        "salt1": srp_derivation.salt1.hex(),
        "salt2": srp_derivation.salt2.hex(),
        "g": srp_derivation.g,
        "p": srp_derivation.p.hex(),
    }


@pytest.fixture
def config_data(srp_algo_data) -> dict:
    return {
        "new_algo": srp_algo_data,
        "new_secure_algo": {"type": SECURE_KDF_PBKDF2, "salt": "0011"},
        "secure_random": "deadbeef",
    }


class TestValidateHexString:
    def test_lowercases(self):
        assert validate_hex_string("ABCD") == "abcd"

    def test_rejects_non_hex(self):
        with pytest.raises(ValueError, match="valid hex"):
            validate_hex_string("xyz")

    def test_length(self):
        with pytest.raises(ValueError, match="4 hex characters"):
            validate_hex_string("ab", 4)


class TestPasswordKdfAlgo:
    """Tests for PasswordKdfAlgo."""

    def test_to_derivation(self, srp_algo_data, srp_derivation):
        assert PasswordKdfAlgo(**srp_algo_data).to_derivation() == srp_derivation

    def test_from_derivation(self, srp_derivation, srp_algo_data):
        assert PasswordKdfAlgo.from_derivation(srp_derivation).model_dump() == srp_algo_data

    def test_unknown_tag_decodes_to_unknown(self):
        assert isinstance(PasswordKdfAlgo(type="argon2id_future").to_derivation(), UnknownPasswordDerivation)

    def test_from_unknown_derivation(self):
        assert PasswordKdfAlgo.from_derivation(UnknownPasswordDerivation()).type == "unknown"

    @pytest.mark.parametrize("missing", ["salt1", "salt2", "g", "p"])
    def test_srp_requires_all_fields(self, srp_algo_data, missing):
        del srp_algo_data[missing]
        with pytest.raises(ValidationError, match="requires salt1, salt2, g and p"):
            PasswordKdfAlgo(**srp_algo_data)

    def test_g_bounded_to_int32(self, srp_algo_data):
        srp_algo_data["g"] = 2 ** 31
        with pytest.raises(ValidationError):
            PasswordKdfAlgo(**srp_algo_data)

    def test_rejects_bad_hex(self, srp_algo_data):
        srp_algo_data["salt1"] = "zz"
        with pytest.raises(ValidationError):
            PasswordKdfAlgo(**srp_algo_data)


class TestSecurePasswordKdfAlgo:
    """Tests for SecurePasswordKdfAlgo."""

    def test_sha512(self):
        algo = SecurePasswordKdfAlgo(type=SECURE_KDF_SHA512, salt="00ff")
        assert algo.to_derivation() == SHA512SecurePasswordDerivation(salt=b"\x00\xff")

    def test_pbkdf2(self):
        algo = SecurePasswordKdfAlgo(type=SECURE_KDF_PBKDF2, salt="00ff")
        assert algo.to_derivation() == PBKDF2SecurePasswordDerivation(salt=b"\x00\xff")

    def test_unknown(self):
        assert isinstance(SecurePasswordKdfAlgo(type="x").to_derivation(), UnknownSecurePasswordDerivation)

    def test_salt_required(self):
        with pytest.raises(ValidationError, match="requires salt"):
            SecurePasswordKdfAlgo(type=SECURE_KDF_PBKDF2)

    @pytest.mark.parametrize(
        "derivation",
        [
            SHA512SecurePasswordDerivation(salt=b"\x01"),
            PBKDF2SecurePasswordDerivation(salt=b"\x01"),
            UnknownSecurePasswordDerivation(),
        ],
    )
    def test_from_derivation(self, derivation):
        assert SecurePasswordKdfAlgo.from_derivation(derivation).to_derivation() == derivation


class TestPasswordConfiguration:
    """Tests for PasswordConfiguration."""

    def test_no_password(self, config_data):
        config = PasswordConfiguration(**config_data)
        assert not config.has_password
        assert config.current_derivation() is None
        assert config.srp_challenge() is None

    def test_with_password(self, config_data, srp_algo_data, srp_derivation):
        config = PasswordConfiguration(**config_data, current_algo=srp_algo_data, srp_B="0A0B", srp_id=42)

        assert config.has_password
        assert config.current_derivation() == srp_derivation
        challenge = config.srp_challenge()
        assert challenge.session_id == 42
        assert challenge.B == b"\x0a\x0b"

    @pytest.mark.parametrize(
        "flags,recovery,secure_values",
        [(0, False, False), (1, True, False), (2, False, True), (3, True, True)],
    )
    def test_from_flags(self, config_data, flags, recovery, secure_values):
        config = PasswordConfiguration.from_flags(flags, **config_data)
        assert config.has_recovery is recovery
        assert config.has_secure_values is secure_values

    def test_rejects_sha512_for_new_secure_values(self, config_data):
        config_data["new_secure_algo"] = {"type": SECURE_KDF_SHA512, "salt": "00"}
        with pytest.raises(ValidationError, match="must not offer sha512"):
            PasswordConfiguration(**config_data)

    def test_rejects_bad_secure_random(self, config_data):
        config_data["secure_random"] = "not-hex"
        with pytest.raises(ValidationError):
            PasswordConfiguration(**config_data)


class TestCheckPasswordSRPRequest:
    """Tests for CheckPasswordSRPRequest."""

    def test_from_and_to_proof(self):
        proof = SRPProof(session_id=5, A=b"\x01" * 256, M1=b"\x02" * 32)
        request = CheckPasswordSRPRequest.from_proof(proof)
        assert request.A == "01" * 256
        assert request.to_proof() == proof

    def test_m1_length(self):
        with pytest.raises(ValidationError):
            CheckPasswordSRPRequest(srp_id=1, A="01", M1="00" * 31)


class TestPasswordInputSettings:
    def test_hash_must_be_hex(self, srp_algo_data):
        with pytest.raises(ValidationError):
            PasswordInputSettings(new_algo=srp_algo_data, new_password_hash="xyz")

    def test_secure_pair(self, srp_algo_data):
        settings = PasswordInputSettings(
            new_algo=srp_algo_data,
            new_password_hash="ab",
            new_secure_algo={"type": SECURE_KDF_PBKDF2, "salt": "00"},
            new_secure_password_hash="CD",
        )
        assert settings.new_secure_password_hash == "cd"
        assert settings.new_secure_algo.to_derivation() == PBKDF2SecurePasswordDerivation(salt=b"\x00")

    def test_secure_pair_must_be_complete(self, srp_algo_data):
        with pytest.raises(ValidationError, match="must be set together"):
            PasswordInputSettings(
                new_algo=srp_algo_data,
                new_password_hash="ab",
                new_secure_algo={"type": SECURE_KDF_PBKDF2, "salt": "00"},
            )

    def test_default_hint(self, srp_algo_data):
        settings = PasswordInputSettings(new_algo=srp_algo_data, new_password_hash="AB")
        assert settings.hint == ""
        assert settings.new_password_hash == "ab"
        assert isinstance(settings.new_algo.to_derivation(), SRPPasswordDerivation)

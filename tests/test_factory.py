import json

import pytest
from cryptography.hazmat.primitives.serialization import load_pem_private_key
from jwt.algorithms import RSAAlgorithm
from jwt.utils import base64url_encode

from tokensig import (
    build_validator, validator_from_jwk, supported_algorithms,
    HS256Validator, HS384Validator, RS256Validator, RS512Validator, NoneValidator, KidValidator, SetValidator,
    AlgorithmMismatchError, ConfigurationError, DuplicateAlgorithmError, InvalidKeyError,
)


pytestmark = pytest.mark.filterwarnings("ignore::tokensig.exceptions.InsecureKeyLengthWarning")


def hmac_jwk(secret, alg="HS256", kid=None):
    jwk = {"kty": "oct", "k": base64url_encode(secret).decode(), "alg": alg}
    if kid:
        jwk["kid"] = kid
    return jwk


@pytest.fixture
def rsa_jwks(rsa_pair):
    key = load_pem_private_key(rsa_pair[0], password=None)
    private = RSAAlgorithm.to_jwk(key, as_dict=True)
    public = RSAAlgorithm.to_jwk(key.public_key(), as_dict=True)
    return private, public


class TestBuildValidator:

    def test_leaves(self, rsa_pair):
        priv, pub = rsa_pair

        assert isinstance(build_validator({"none": None}), NoneValidator)
        assert isinstance(build_validator({"HS384": {"secret": "secret2"}}), HS384Validator)

        rs = build_validator({"RS512": {"public": pub.decode(), "private": priv.decode()}})
        assert isinstance(rs, RS512Validator)
        assert rs.can_sign
        assert not build_validator({"RS512": {"public": pub.decode()}}).can_sign


    def test_hmac_from_config_matches_direct(self):
        built = build_validator({"HS256": {"secret": "secret1"}})
        assert built.digest("msg") == HS256Validator("secret1").digest("msg")


    def test_json_string(self):
        config = json.dumps({"set": [{"HS256": {"secret": "secret1"}}, {"none": None}]})
        validator = build_validator(config)

        assert isinstance(validator, SetValidator)
        assert validator.algorithms == ["HS256", "none"]
        assert validator.validate({"alg": "none"}, "msg", "")


    def test_kid_tree(self):
        validator = build_validator({"kid": {
            "kid1": {"HS256": {"secret": "secret1"}},
            "kid2": {"HS256": {"secret": "secret2"}},
        }})

        assert isinstance(validator, KidValidator)
        assert validator.kids == ["kid1", "kid2"]
        sig = HS256Validator("secret2").digest("msg")
        assert validator.validate({"kid": "kid2"}, "msg", sig)
        assert not validator.validate({"kid": "kid1"}, "msg", sig)


    def test_nested_set_of_kids(self, rsa_pair):
        validator = build_validator({"set": [
            {"kid": {"a": {"HS256": {"secret": "secret1"}}}},
            {"kid": {"b": {"RS256": {"public": rsa_pair[1].decode()}}}},
        ]})

        sig = RS256Validator(private_key=rsa_pair[0]).digest("msg")
        assert validator.validate({"alg": "RS256", "kid": "b"}, "msg", sig)
        assert not validator.validate({"alg": "RS256", "kid": "a"}, "msg", sig)


    def test_kid_tree_with_mixed_algorithms(self):
        with pytest.raises(AlgorithmMismatchError):
            build_validator({"kid": {
                "kid1": {"HS256": {"secret": "secret1"}},
                "kid2": {"HS384": {"secret": "secret2"}},
            }})


    def test_set_with_duplicate_algorithms(self):
        with pytest.raises(DuplicateAlgorithmError):
            build_validator({"set": [{"HS256": {"secret": "a"}}, {"HS256": {"secret": "b"}}]})


    @pytest.mark.parametrize("config", [
        "{not json",
        [],
        {},
        {"HS256": {"secret": "a"}, "HS384": {"secret": "b"}},
        {"HS999": {"secret": "a"}},
        {"HS256": "secret1"},
        {"HS256": {}},
        {"HS256": {"secret": "a", "salt": "b"}},
        {"HS256": {"secret": 42}},
        {"RS256": {}},
        {"RS256": {"public": "not a pem"}},
        {"RS256": {"public": 42}},
        {"none": {"secret": "a"}},
        {"set": {"HS256": {"secret": "a"}}},
        {"kid": [{"HS256": {"secret": "a"}}]},
        {"set": [{"bogus": None}]},
    ])
    def test_malformed_config(self, config):
        with pytest.raises(ConfigurationError):
            build_validator(config)


    def test_error_names_the_entry(self):
        with pytest.raises(ConfigurationError) as context:
            build_validator({"set": [{"none": None}, {"HS256": {}}]})

        assert "$.set[1].HS256" in str(context.value)


    def test_options_are_passed_down(self):
        with pytest.raises(InvalidKeyError):
            build_validator({"set": [{"HS256": {"secret": "short"}}]}, options={"enforce_minimum_key_length": True})


    def test_options_are_checked(self):
        with pytest.raises(ConfigurationError):
            build_validator({"none": None}, options={"nope": 1})


    def test_supported_algorithms(self):
        assert supported_algorithms() == ["none", "HS256", "HS384", "HS512", "RS256", "RS384", "RS512"]


class TestJWK:

    def test_hmac_jwk_should_parse_and_verify(self):
        validator = HS256Validator.from_jwk(hmac_jwk(b"secret1"))

        signature = validator.digest(b"Hello World!")
        assert signature == HS256Validator("secret1").digest(b"Hello World!")
        assert validator.validate(None, b"Hello World!", signature)


    def test_hmac_jwk_as_json_string(self):
        validator = HS384Validator.from_jwk(json.dumps(hmac_jwk(b"secret2", "HS384")))
        assert validator.algorithm == "HS384"


    def test_jwk_alg_must_match_validator(self, rsa_jwks):
        with pytest.raises(InvalidKeyError):
            HS384Validator.from_jwk(hmac_jwk(b"secret2", "HS256"))
        with pytest.raises(InvalidKeyError):
            RS512Validator.from_jwk(dict(rsa_jwks[1], alg="RS256"))
        with pytest.raises(InvalidKeyError):
            build_validator({"HS512": {"jwk": hmac_jwk(b"secret3", "HS256")}})


    def test_hmac_from_jwk_should_raise_exception_if_not_hmac_key(self, rsa_jwks):
        with pytest.raises(InvalidKeyError):
            HS256Validator.from_jwk(rsa_jwks[1])


    @pytest.mark.parametrize("jwk", ["{}", "<this isn't json>", {"kty": "oct"}, {"kty": "oct", "k": 5}])
    def test_hmac_from_jwk_invalid(self, jwk):
        with pytest.raises(InvalidKeyError):
            HS256Validator.from_jwk(jwk)


    def test_rsa_private_jwk_signs(self, rsa_jwks, rsa_pair):
        private, public = rsa_jwks
        signer = RS256Validator.from_jwk(private)
        verifier = RS256Validator.from_jwk(public)

        assert signer.can_sign
        assert not verifier.can_sign
        assert verifier.validate(None, "msg", signer.digest("msg"))
        assert RS256Validator(rsa_pair[1]).validate(None, "msg", signer.digest("msg"))


    def test_rsa_from_jwk_rejects_hmac_key(self):
        with pytest.raises(InvalidKeyError):
            RS256Validator.from_jwk(hmac_jwk(b"secret1"))


    def test_validator_from_jwk_uses_alg(self, rsa_jwks):
        public = dict(rsa_jwks[1], alg="RS512")

        assert isinstance(validator_from_jwk(public), RS512Validator)
        assert isinstance(validator_from_jwk(json.dumps(hmac_jwk(b"x", "HS384"))), HS384Validator)


    @pytest.mark.parametrize("jwk", ["nope", [], {"kty": "oct", "k": "eA"}, {"kty": "oct", "k": "eA", "alg": "none"}, {"alg": ["HS256"]}])
    def test_validator_from_jwk_needs_supported_alg(self, jwk):
        with pytest.raises(ConfigurationError):
            validator_from_jwk(jwk)


    def test_jwk_in_config(self, rsa_jwks):
        validator = build_validator({"set": [
            {"HS256": {"jwk": hmac_jwk(b"secret1")}},
            {"RS256": {"jwk": rsa_jwks[1]}},
        ]})

        assert validator.validate({"alg": "HS256"}, "msg", HS256Validator("secret1").digest("msg"))


class TestJWKSet:

    def test_from_jwks(self):
        jwks = {"keys": [hmac_jwk(b"secret1", kid="a"), hmac_jwk(b"secret2", kid="b")]}
        validator = KidValidator.from_jwks(jwks)

        assert validator.kids == ["a", "b"]
        assert validator.algorithm == "HS256"
        assert validator.validate({"kid": "b"}, "msg", HS256Validator("secret2").digest("msg"))
        assert not validator.validate({"kid": "a"}, "msg", HS256Validator("secret2").digest("msg"))


    def test_from_jwks_json_string(self, rsa_jwks):
        public = dict(rsa_jwks[1], alg="RS256", kid="rsa1")
        validator = KidValidator.from_jwks(json.dumps({"keys": [public]}))

        assert validator.algorithm == "RS256"
        assert "rsa1" in validator


    def test_from_jwks_mixed_algorithms(self):
        jwks = {"keys": [hmac_jwk(b"secret1", kid="a"), hmac_jwk(b"secret2", "HS512", kid="b")]}

        with pytest.raises(AlgorithmMismatchError):
            KidValidator.from_jwks(jwks)


    @pytest.mark.parametrize("jwks", [
        "{bad json", [], {}, {"keys": {}},
        {"keys": [{"kty": "oct", "k": "eA", "alg": "HS256"}]},
        {"keys": ["not a key"]},
    ])
    def test_from_jwks_malformed(self, jwks):
        with pytest.raises(ConfigurationError):
            KidValidator.from_jwks(jwks)

import logging
from typing import Any, Dict, Optional, Union

from jwt import algorithms as jwt_algorithms
from jwt import exceptions as jwt_exceptions

from .exceptions import InvalidKeyError
from .options import merge_options, check_hmac_key_length
from .validators import MessageSigner, _as_bytes, _check_jwk_algorithm


logger = logging.getLogger(__name__)


class HMACValidator(MessageSigner):
    """Keyed-digest signer (HS256 / HS384 / HS512).

    Verification recomputes the HMAC and compares it in constant time.
    """

    SHA256 = "SHA256"; SHA384 = "SHA384"; SHA512 = "SHA512"

    _hashes = {
        "SHA256": (jwt_algorithms.HMACAlgorithm.SHA256, "HS256"),
        "SHA384": (jwt_algorithms.HMACAlgorithm.SHA384, "HS384"),
        "SHA512": (jwt_algorithms.HMACAlgorithm.SHA512, "HS512"),
    }

    def __init__(self, secret: Union[str, bytes], hash_alg: str = "SHA256", options: Optional[Dict[str, Any]] = None):

        if hash_alg not in self._hashes:
            raise ValueError(f"Unsupported hash: {hash_alg}")

        hash_fn, self.algorithm = self._hashes[hash_alg]
        self.hash_alg = hash_alg
        self._impl = jwt_algorithms.HMACAlgorithm(hash_fn)
        self._size = hash_fn().digest_size

        key = _as_bytes(secret)
        if key is None:
            raise TypeError("Expected a string value")

        try:
            self._secret = self._impl.prepare_key(key)
        except jwt_exceptions.InvalidKeyError as e:
            raise InvalidKeyError(str(e)) from e

        check_hmac_key_length(self._secret, self.algorithm, merge_options(options))
        logger.debug("Created %s validator", self.algorithm)


    @classmethod
    def from_jwk(cls, jwk: Union[str, Dict[str, Any]], hash_alg: str = "SHA256", options: Optional[Dict[str, Any]] = None):
        ''' Build from an ``oct`` JWK, given as a dict or a JSON string '''

        try:
            secret = jwt_algorithms.HMACAlgorithm.from_jwk(jwk)
        except jwt_exceptions.InvalidKeyError as e:
            raise InvalidKeyError(str(e)) from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidKeyError(f"Invalid HMAC JWK: {e}") from e

        if cls is HMACValidator:
            validator = cls(secret, hash_alg, options=options)
        else:
            validator = cls(secret, options=options)

        _check_jwk_algorithm(jwk, validator)
        return validator


    @property
    def signature_size(self) -> int:
        return self._size


    def _sign(self, data: bytes) -> bytes:
        return self._impl.sign(data, self._secret)


    def _verify(self, data: bytes, signature: bytes) -> bool:
        # PyJWT's verify goes through hmac.compare_digest
        return self._impl.verify(data, self._secret, signature)


    def __repr__(self):
        return f"{type(self).__name__}(algorithm={self.algorithm!r})"


class HS256Validator(HMACValidator):

    def __init__(self, secret: Union[str, bytes], options: Optional[Dict[str, Any]] = None):
        super().__init__(secret, HMACValidator.SHA256, options)


class HS384Validator(HMACValidator):

    def __init__(self, secret: Union[str, bytes], options: Optional[Dict[str, Any]] = None):
        super().__init__(secret, HMACValidator.SHA384, options)


class HS512Validator(HMACValidator):

    def __init__(self, secret: Union[str, bytes], options: Optional[Dict[str, Any]] = None):
        super().__init__(secret, HMACValidator.SHA512, options)

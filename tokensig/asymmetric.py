import logging
from typing import Any, Dict, Optional, Union

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from jwt import algorithms as jwt_algorithms
from jwt import exceptions as jwt_exceptions

from .exceptions import InvalidKeyError
from .options import merge_options, check_rsa_key_size
from .validators import MessageSigner, _check_jwk_algorithm


logger = logging.getLogger(__name__)

KeyInput = Union[str, bytes, RSAPublicKey, RSAPrivateKey]


class RSAValidator(MessageSigner):
    """RSASSA-PKCS1-v1_5 signer (RS256 / RS384 / RS512).

    Built from a public key, a private key, or both. Without a private key the
    instance only verifies and :meth:`sign` raises
    :class:`~tokensig.exceptions.MissingKeyError`.
    """

    SHA256 = "SHA256"; SHA384 = "SHA384"; SHA512 = "SHA512"

    _hashes = {
        "SHA256": (jwt_algorithms.RSAAlgorithm.SHA256, "RS256"),
        "SHA384": (jwt_algorithms.RSAAlgorithm.SHA384, "RS384"),
        "SHA512": (jwt_algorithms.RSAAlgorithm.SHA512, "RS512"),
    }

    def __init__(
        self, public_key: Optional[KeyInput] = None, private_key: Optional[KeyInput] = None,
        hash_alg: str = "SHA256", options: Optional[Dict[str, Any]] = None
    ):

        if hash_alg not in self._hashes:
            raise ValueError(f"Unsupported hash: {hash_alg}")

        hash_cls, self.algorithm = self._hashes[hash_alg]
        self.hash_alg = hash_alg
        self._impl = jwt_algorithms.RSAAlgorithm(hash_cls)

        if public_key is None and private_key is None:
            raise InvalidKeyError(f"{self.algorithm} needs a public key, a private key, or both")

        self._private_key = None
        if private_key is not None:
            self._private_key = self._load(private_key)
            if not isinstance(self._private_key, RSAPrivateKey):
                raise InvalidKeyError("Expected an RSA private key")

        if public_key is not None:
            self._public_key = self._load(public_key)
            if isinstance(self._public_key, RSAPrivateKey):
                self._public_key = self._public_key.public_key()
            if not isinstance(self._public_key, RSAPublicKey):
                raise InvalidKeyError("Expected an RSA public key")
        else:
            self._public_key = self._private_key.public_key()

        if self._private_key is not None:
            if self._private_key.public_key().public_numbers() != self._public_key.public_numbers():
                raise InvalidKeyError("The public and private keys do not form a pair")

        check_rsa_key_size(self._public_key.key_size, merge_options(options))
        logger.debug("Created %s validator (%d bits, signing=%s)", self.algorithm, self.key_size, self.can_sign)


    def _load(self, key: KeyInput):

        try:
            return self._impl.prepare_key(key)
        except jwt_exceptions.InvalidKeyError as e:
            raise InvalidKeyError(str(e)) from e
        except (TypeError, ValueError) as e:
            raise InvalidKeyError(f"Could not load RSA key: {e}") from e


    @classmethod
    def from_jwk(cls, jwk: Union[str, Dict[str, Any]], hash_alg: str = "SHA256", options: Optional[Dict[str, Any]] = None):
        ''' A private JWK gives a signing instance, a public one a verify-only instance '''

        try:
            key = jwt_algorithms.RSAAlgorithm.from_jwk(jwk)
        except jwt_exceptions.InvalidKeyError as e:
            raise InvalidKeyError(str(e)) from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidKeyError(f"Invalid RSA JWK: {e}") from e

        if isinstance(key, RSAPrivateKey):
            keys = {"private_key": key}
        else:
            keys = {"public_key": key}

        if cls is RSAValidator:
            validator = cls(hash_alg=hash_alg, options=options, **keys)
        else:
            validator = cls(options=options, **keys)

        _check_jwk_algorithm(jwk, validator)
        return validator


    @property
    def key_size(self) -> int:
        return self._public_key.key_size


    @property
    def signature_size(self) -> int:
        return (self.key_size + 7) // 8


    @property
    def can_sign(self) -> bool:
        return self._private_key is not None


    def _sign(self, data: bytes) -> bytes:
        return self._impl.sign(data, self._private_key)


    def _verify(self, data: bytes, signature: bytes) -> bool:
        return self._impl.verify(data, self._public_key, signature)


    def __repr__(self):
        return f"{type(self).__name__}(algorithm={self.algorithm!r}, key_size={self.key_size}, can_sign={self.can_sign})"


class RS256Validator(RSAValidator):

    def __init__(self, public_key: Optional[KeyInput] = None, private_key: Optional[KeyInput] = None, options: Optional[Dict[str, Any]] = None):
        super().__init__(public_key, private_key, RSAValidator.SHA256, options)


class RS384Validator(RSAValidator):

    def __init__(self, public_key: Optional[KeyInput] = None, private_key: Optional[KeyInput] = None, options: Optional[Dict[str, Any]] = None):
        super().__init__(public_key, private_key, RSAValidator.SHA384, options)


class RS512Validator(RSAValidator):

    def __init__(self, public_key: Optional[KeyInput] = None, private_key: Optional[KeyInput] = None, options: Optional[Dict[str, Any]] = None):
        super().__init__(public_key, private_key, RSAValidator.SHA512, options)

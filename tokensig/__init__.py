from .exceptions import (
    TokenSigError, ConfigurationError, InvalidKeyError, MissingKeyError, AlgorithmMismatchError,
    DuplicateKeyIdError, DuplicateAlgorithmError, InsufficientBufferError, InsecureKeyLengthWarning,
)
from .header import HeaderView, MISSING, ALG, KID
from .options import DEFAULT_OPTIONS, merge_options
from .validators import MessageValidator, MessageSigner, NoneValidator
from .symmetric import HMACValidator, HS256Validator, HS384Validator, HS512Validator
from .asymmetric import RSAValidator, RS256Validator, RS384Validator, RS512Validator
from .kid import KidValidator
from .setvalidator import SetValidator
from .factory import build_validator, validator_from_jwk, supported_algorithms


__version__ = "0.1.0"

__all__ = [
    "TokenSigError", "ConfigurationError", "InvalidKeyError", "MissingKeyError", "AlgorithmMismatchError",
    "DuplicateKeyIdError", "DuplicateAlgorithmError", "InsufficientBufferError", "InsecureKeyLengthWarning",
    "HeaderView", "MISSING", "ALG", "KID",
    "DEFAULT_OPTIONS", "merge_options",
    "MessageValidator", "MessageSigner", "NoneValidator",
    "HMACValidator", "HS256Validator", "HS384Validator", "HS512Validator",
    "RSAValidator", "RS256Validator", "RS384Validator", "RS512Validator",
    "KidValidator", "SetValidator",
    "build_validator", "validator_from_jwk", "supported_algorithms",
]

import logging, warnings
from typing import Optional, Dict, Any

from .exceptions import ConfigurationError, InvalidKeyError, InsecureKeyLengthWarning


logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: Dict[str, Any] = {
    "enforce_minimum_key_length": False,
}

# Minimum secret size in bytes, one hash width
HMAC_MIN_KEY_LENGTH = {"HS256": 32, "HS384": 48, "HS512": 64}

RSA_MIN_KEY_SIZE = 2048


def merge_options(options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:

    merged = DEFAULT_OPTIONS.copy()
    if options is None:
        return merged

    if not isinstance(options, dict):
        raise TypeError("options must be a dict")

    unknown = sorted(set(options) - set(DEFAULT_OPTIONS))
    if unknown:
        raise ConfigurationError(f"Unknown options: {', '.join(unknown)}")

    merged.update(options)
    return merged


def _key_policy(msg: str, options: Dict[str, Any]) -> None:

    if options.get("enforce_minimum_key_length"):
        logger.warning("Rejecting key: %s", msg)
        raise InvalidKeyError(msg)

    warnings.warn(msg, InsecureKeyLengthWarning)


def check_hmac_key_length(secret: bytes, algorithm: str, options: Dict[str, Any]) -> None:

    min_len = HMAC_MIN_KEY_LENGTH.get(algorithm, 0)
    if len(secret) < min_len:
        _key_policy(
            f"The specified key is {len(secret)} bytes long, which is below the minimum recommended length of {min_len} bytes.",
            options)


def check_rsa_key_size(key_size: int, options: Dict[str, Any]) -> None:

    if key_size < RSA_MIN_KEY_SIZE:
        _key_policy(
            f"The specified key is {key_size} bits, which is below the minimum recommended length of {RSA_MIN_KEY_SIZE} bits.",
            options)

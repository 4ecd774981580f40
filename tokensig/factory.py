"""Build validator trees from configuration.

Every node is an object with exactly one key::

    {"none": null}
    {"HS256": {"secret": "..."}}                      # or {"jwk": {...}}
    {"RS256": {"public": "<pem>", "private": "<pem>"}}  # or {"jwk": {...}}
    {"set": [<node>, ...]}
    {"kid": {"<kid>": <node>, ...}}

The configuration may be given as a dict or as a JSON string.
"""

import json, logging
from typing import Any, Dict, List, Optional, Union

from .asymmetric import RS256Validator, RS384Validator, RS512Validator
from .exceptions import ConfigurationError
from .kid import KidValidator
from .options import merge_options
from .setvalidator import SetValidator
from .symmetric import HS256Validator, HS384Validator, HS512Validator
from .validators import MessageValidator, NoneValidator


logger = logging.getLogger(__name__)

_HMAC = {"HS256": HS256Validator, "HS384": HS384Validator, "HS512": HS512Validator}
_RSA = {"RS256": RS256Validator, "RS384": RS384Validator, "RS512": RS512Validator}


def supported_algorithms() -> List[str]:
    return ["none", *_HMAC, *_RSA]


def validator_from_jwk(jwk: Union[str, Dict[str, Any]], options: Optional[Dict[str, Any]] = None) -> MessageValidator:
    ''' Leaf validator for a JWK that names its algorithm in ``alg`` '''

    if isinstance(jwk, str):
        try:
            jwk = json.loads(jwk)
        except ValueError as e:
            raise ConfigurationError(f"JWK is not valid JSON: {e}") from e

    if not isinstance(jwk, dict):
        raise ConfigurationError("JWK must be an object")

    alg = jwk.get("alg")
    cls = (_HMAC.get(alg) or _RSA.get(alg)) if isinstance(alg, str) else None
    if cls is None:
        raise ConfigurationError(f"JWK algorithm {alg!r} is not supported")
    return cls.from_jwk(jwk, options=options)


def _single_entry(node: Any, path: str):

    if not isinstance(node, dict) or len(node) != 1:
        raise ConfigurationError(f"{path}: expected an object with exactly one key")
    return next(iter(node.items()))


def _key_params(params: Any, allowed: set, path: str) -> Dict[str, Any]:

    if not isinstance(params, dict):
        raise ConfigurationError(f"{path}: expected an object of key parameters")

    unknown = sorted(set(params) - allowed)
    if unknown:
        raise ConfigurationError(f"{path}: unknown parameters {', '.join(unknown)}")
    return params


def _build_leaf(cls, path: str, *args, **kwargs) -> MessageValidator:

    try:
        return cls(*args, **kwargs)
    except TypeError as e:
        raise ConfigurationError(f"{path}: {e}") from e


def _build(node: Any, options: Dict[str, Any], path: str) -> MessageValidator:

    name, params = _single_entry(node, path)
    path = f"{path}.{name}"

    if name == "none":
        if params not in (None, {}):
            raise ConfigurationError(f"{path}: takes no parameters")
        return NoneValidator()

    if name in _HMAC:
        params = _key_params(params, {"secret", "jwk"}, path)
        if "jwk" in params:
            return _HMAC[name].from_jwk(params["jwk"], options=options)
        if "secret" not in params:
            raise ConfigurationError(f'{path}: needs "secret" or "jwk"')
        return _build_leaf(_HMAC[name], path, params["secret"], options=options)

    if name in _RSA:
        params = _key_params(params, {"public", "private", "jwk"}, path)
        if "jwk" in params:
            return _RSA[name].from_jwk(params["jwk"], options=options)
        return _build_leaf(_RSA[name], path, params.get("public"), params.get("private"), options=options)

    if name == "set":
        if not isinstance(params, list):
            raise ConfigurationError(f"{path}: expected a list")
        return SetValidator([_build(child, options, f"{path}[{i}]") for i, child in enumerate(params)])

    if name == "kid":
        if not isinstance(params, dict):
            raise ConfigurationError(f"{path}: expected an object mapping key ids to validators")
        kid_validator = KidValidator()
        for kid, child in params.items():
            kid_validator.register(kid, _build(child, options, f"{path}.{kid}"))
        return kid_validator

    raise ConfigurationError(f"{path}: unknown validator type")


def build_validator(config: Union[str, bytes, Dict[str, Any]], options: Optional[Dict[str, Any]] = None) -> MessageValidator:

    merged = merge_options(options)

    if isinstance(config, (str, bytes)):
        try:
            config = json.loads(config)
        except ValueError as e:
            raise ConfigurationError(f"Validator configuration is not valid JSON: {e}") from e

    validator = _build(config, merged, "$")
    logger.debug("Built %r", validator)
    return validator

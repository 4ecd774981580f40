"""Key-id dispatch.

A :class:`KidValidator` holds several keys for one algorithm and lets the
token's ``kid`` header pick which key checks the signature. The header is
attacker controlled, so the algorithm is pinned: every registered validator
must share the algorithm of the first one, and that is checked when the key
is registered, not when a token arrives.
"""

import json, logging
from typing import Any, Dict, Iterator, List, Optional, Union

from .exceptions import AlgorithmMismatchError, ConfigurationError, DuplicateKeyIdError
from .header import HeaderView, KID
from .validators import MessageValidator, BytesLike


logger = logging.getLogger(__name__)


class KidValidator(MessageValidator):

    def __init__(self):
        self._validators: Dict[str, MessageValidator] = {}
        self._algorithm: Optional[str] = None


    @property
    def algorithm(self) -> Optional[str]:
        return self._algorithm


    def register(self, kid: str, validator: MessageValidator) -> "KidValidator":
        """Add ``validator`` under ``kid``.

        Not thread-safe. Fill the registry during setup, then share it.
        """

        if not isinstance(kid, str):
            raise TypeError("kid must be a string")
        if not isinstance(validator, MessageValidator):
            raise TypeError("Object is not of type `MessageValidator`")

        algorithm = validator.algorithm
        if algorithm is None:
            logger.warning("Refusing %r under kid %r: no single algorithm", validator, kid)
            raise ConfigurationError(f'Validator for kid "{kid}" does not have a single algorithm')

        if validator._reaches(self):
            logger.warning("Refusing %r under kid %r: it delegates back to this registry", validator, kid)
            raise ConfigurationError(f'Validator for kid "{kid}" would make the registry contain itself')

        if kid in self._validators:
            logger.warning("Refusing duplicate kid %r", kid)
            raise DuplicateKeyIdError(kid)

        if self._algorithm is not None and algorithm != self._algorithm:
            logger.warning("Refusing %r under kid %r: registry is pinned to %s", validator, kid, self._algorithm)
            raise AlgorithmMismatchError(self._algorithm, algorithm)

        self._validators[kid] = validator
        self._algorithm = algorithm
        logger.debug("Registered kid %r for %s", kid, algorithm)
        return self


    @classmethod
    def from_jwks(cls, jwks: Union[str, Dict[str, Any]], options: Optional[Dict[str, Any]] = None) -> "KidValidator":
        ''' Build from a JWK set; every key needs a ``kid`` and an ``alg`` '''

        # Imported here, the factory imports this module
        from .factory import validator_from_jwk

        if isinstance(jwks, str):
            try:
                jwks = json.loads(jwks)
            except ValueError as e:
                raise ConfigurationError(f"JWK set is not valid JSON: {e}") from e

        if not isinstance(jwks, dict) or not isinstance(jwks.get("keys"), list):
            raise ConfigurationError('JWK set must be an object with a "keys" list')

        kid_validator = cls()
        for jwk in jwks["keys"]:
            if not isinstance(jwk, dict) or not isinstance(jwk.get("kid"), str):
                raise ConfigurationError('Every key in the set needs a string "kid"')
            kid_validator.register(jwk["kid"], validator_from_jwk(jwk, options=options))
        return kid_validator


    def _children(self):
        return self._validators.values()


    def get(self, kid: str) -> Optional[MessageValidator]:
        return self._validators.get(kid)


    @property
    def kids(self) -> List[str]:
        return list(self._validators)


    def _select(self, header: Any) -> Optional[MessageValidator]:

        view = HeaderView.wrap(header)
        if view is None:
            logger.debug("No header, rejecting")
            return None

        kid = view.get_string(KID)
        if kid is None:
            logger.debug("Header has no string kid, rejecting")
            return None

        validator = self._validators.get(kid)
        if validator is None:
            logger.debug("Unknown kid %r, rejecting", kid)
        return validator


    def validate(self, header: Any, message: BytesLike, signature: BytesLike) -> bool:

        validator = self._select(header)
        if validator is None:
            return False
        return validator.validate(header, message, signature)


    def accepts(self, header: Any) -> bool:

        validator = self._select(header)
        return validator is not None and validator.accepts(header)


    def __len__(self):
        return len(self._validators)


    def __contains__(self, kid):
        return kid in self._validators


    def __iter__(self) -> Iterator[str]:
        return iter(self._validators)


    def __repr__(self):
        return f"KidValidator(algorithm={self._algorithm!r}, kids={self.kids!r})"

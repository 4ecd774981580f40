import logging
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ConfigurationError, DuplicateAlgorithmError
from .header import HeaderView, ALG
from .validators import MessageValidator, BytesLike


logger = logging.getLogger(__name__)


class SetValidator(MessageValidator):
    """Pick one of several validators by the header's ``alg`` field.

    Use this when more than one algorithm has to be accepted. The untrusted
    header decides which member runs, so every member must hold a key that
    is trusted on its own. Nothing outside the set is ever tried, and there
    is no fallback to ``none``.
    """

    def __init__(self, validators: Iterable[MessageValidator]):

        members: Dict[str, MessageValidator] = {}
        for validator in validators:
            if not isinstance(validator, MessageValidator):
                raise TypeError("Object is not of type `MessageValidator`")

            algorithm = validator.algorithm
            if algorithm is None:
                logger.warning("Refusing %r: no single algorithm", validator)
                raise ConfigurationError(f"{validator!r} does not have a single algorithm")
            if algorithm in members:
                logger.warning("Refusing second validator for %s", algorithm)
                raise DuplicateAlgorithmError(algorithm)

            members[algorithm] = validator

        if not members:
            logger.warning("SetValidator built without members, every token will be rejected")

        self._members = members


    @property
    def algorithm(self) -> Optional[str]:
        if len(self._members) == 1:
            return next(iter(self._members))
        return None


    @property
    def algorithms(self) -> List[str]:
        return list(self._members)


    def _children(self):
        return self._members.values()


    def get(self, algorithm: str) -> Optional[MessageValidator]:
        return self._members.get(algorithm)


    def _select(self, header: Any) -> Optional[MessageValidator]:

        view = HeaderView.wrap(header)
        if view is None:
            logger.debug("No header, rejecting")
            return None

        alg = view.get_string(ALG)
        if alg is None:
            logger.debug("Header has no string alg, rejecting")
            return None

        validator = self._members.get(alg)
        if validator is None:
            logger.debug("Algorithm %r is not in the set, rejecting", alg)
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
        return len(self._members)


    def __contains__(self, algorithm):
        return algorithm in self._members


    def __repr__(self):
        return f"SetValidator(algorithms={self.algorithms!r})"

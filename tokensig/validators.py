"""Validator and signer contracts shared by every algorithm family.

A :class:`MessageValidator` answers one question: was ``signature`` made over
``message`` by the key this validator holds? The answer is always a boolean.
Bad input (wrong type, truncated, empty) is not an error, it is just not a
valid signature.

A :class:`MessageSigner` can also produce signatures. Its primitive is
:meth:`MessageSigner.sign`, which signs an explicit byte range into a caller
supplied buffer; :meth:`MessageSigner.digest` is the whole-message shortcut.
"""

import json, logging
from typing import Any, Optional, Union

from .exceptions import InsufficientBufferError, InvalidKeyError, MissingKeyError
from .header import HeaderView


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview, str]


def _as_bytes(value: Any) -> Optional[bytes]:

    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return None


def _byte_range(data: Any, length: Any) -> Optional[bytes]:
    ''' First ``length`` bytes of ``data``, or None when the range is unusable '''

    data = _as_bytes(data)
    if data is None:
        return None
    if isinstance(length, bool) or not isinstance(length, int):
        return None
    if length < 0 or length > len(data):
        return None
    return data[:length]


def _check_jwk_algorithm(jwk: Any, validator: "MessageValidator") -> None:
    ''' A JWK that names its ``alg`` may only back a validator for that algorithm '''

    if isinstance(jwk, str):
        try:
            jwk = json.loads(jwk)
        except ValueError:
            return

    declared = jwk.get("alg") if isinstance(jwk, dict) else None
    if declared is not None and declared != validator.algorithm:
        raise InvalidKeyError(f'JWK is meant for "{declared}", not "{validator.algorithm}"')


class MessageValidator:

    # Algorithm identity, e.g. "HS256". Composites may report None.
    algorithm: Optional[str] = None

    def validate(self, header: Any, message: BytesLike, signature: BytesLike) -> bool:
        raise NotImplementedError


    def _children(self):
        ''' Validators a composite may delegate to; leaves have none '''
        return ()


    def _reaches(self, target: "MessageValidator") -> bool:
        ''' True when ``target`` is this validator or sits anywhere below it '''

        pending, seen = [self], set()
        while pending:
            node = pending.pop()
            if node is target:
                return True
            if id(node) in seen:
                continue
            seen.add(id(node))
            pending.extend(node._children())
        return False


    def accepts(self, header: Any) -> bool:
        ''' True when a token carrying ``header`` would be checked by this validator '''

        view = HeaderView.wrap(header)
        return view is not None and view.algorithm == self.algorithm


    def __repr__(self):
        return f"{type(self).__name__}()"


class MessageSigner(MessageValidator):

    @property
    def signature_size(self) -> int:
        ''' Upper bound, in bytes, of a signature produced by this signer '''
        raise NotImplementedError


    @property
    def can_sign(self) -> bool:
        return True


    def _sign(self, data: bytes) -> bytes:
        raise NotImplementedError


    def _verify(self, data: bytes, signature: bytes) -> bool:
        raise NotImplementedError


    def sign(self, data: BytesLike, length: int, out: Any) -> int:
        """Sign ``data[:length]`` into the writable buffer ``out``.

        Returns the number of bytes written. The buffer must be able to hold
        :attr:`signature_size` bytes.
        """

        chunk = _byte_range(data, length)
        if chunk is None:
            raise ValueError(f"Cannot sign {length!r} bytes of the given data")

        if not self.can_sign:
            raise MissingKeyError(f"{type(self).__name__} was built without a private key and cannot sign")

        view = memoryview(out).cast("B")
        if view.readonly:
            raise TypeError("out must be a writable buffer")

        required = self.signature_size
        if view.nbytes < required:
            raise InsufficientBufferError(required, view.nbytes)

        signature = self._sign(chunk)
        view[:len(signature)] = signature
        return len(signature)


    def digest(self, message: BytesLike) -> bytes:

        data = _as_bytes(message)
        if data is None:
            raise TypeError("Expected a string or bytes-like message")

        out = bytearray(self.signature_size)
        written = self.sign(data, len(data), out)
        return bytes(out[:written])


    def verify(
        self, header: Any, data: BytesLike, length: int,
        signature: BytesLike, signature_length: Optional[int] = None
    ) -> bool:

        chunk = _byte_range(data, length)
        if signature_length is None:
            sig = _as_bytes(signature)
        else:
            sig = _byte_range(signature, signature_length)

        if chunk is None or sig is None:
            logger.debug("%r: unusable data or signature range, rejecting", self)
            return False

        return self._verify(chunk, sig)


    def validate(self, header: Any, message: BytesLike, signature: BytesLike) -> bool:

        data, sig = _as_bytes(message), _as_bytes(signature)
        if data is None or sig is None:
            return False
        return self.verify(header, data, len(data), sig, len(sig))


class NoneValidator(MessageSigner):
    """The ``none`` algorithm: only the empty signature is valid.

    Composite validators never fall back to this; it has to be registered
    explicitly.
    """

    algorithm = "none"

    @property
    def signature_size(self) -> int:
        return 0

    def _sign(self, data: bytes) -> bytes:
        return b""

    def _verify(self, data: bytes, signature: bytes) -> bool:
        return len(signature) == 0

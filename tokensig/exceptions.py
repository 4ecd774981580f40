"""Exceptions raised by tokensig.

Verification never raises: a signature that does not check out is reported
as ``False``. Everything here signals a setup mistake made by the caller.
"""


class TokenSigError(Exception):
    pass


class ConfigurationError(TokenSigError, ValueError):
    pass


class InvalidKeyError(ConfigurationError):
    pass


class MissingKeyError(ConfigurationError):
    ''' Raised when signing is requested from a verify-only validator '''


class AlgorithmMismatchError(ConfigurationError):

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f'Validator uses "{actual}" but this registry only accepts "{expected}"')


class DuplicateKeyIdError(ConfigurationError):

    def __init__(self, kid: str):
        self.kid = kid
        super().__init__(f'Key id "{kid}" is already registered')


class DuplicateAlgorithmError(ConfigurationError):

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        super().__init__(f'More than one validator uses "{algorithm}"')


class InsufficientBufferError(ConfigurationError):

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"Signature needs {required} bytes but the buffer holds {available}")


class InsecureKeyLengthWarning(UserWarning):
    pass

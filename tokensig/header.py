from collections.abc import Mapping
from typing import Any, Optional


ALG = "alg"
KID = "kid"


class _Missing:

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING = _Missing()


class HeaderView:
    """Read-only lookup over a header the caller has already parsed.

    The header is untrusted. Fields are matched by exact name only, and a
    value only counts as a string if it actually is one: ``{"kid": 15}``
    yields ``None`` from :meth:`get_string`, the same as a missing field.
    """

    __slots__ = ("_header",)

    def __init__(self, header: Mapping):
        if not isinstance(header, Mapping):
            raise TypeError("header must be a mapping")
        self._header = header


    @classmethod
    def wrap(cls, header: Any) -> Optional["HeaderView"]:
        ''' None, or anything that is not a mapping, gives None '''

        if isinstance(header, HeaderView):
            return header
        if isinstance(header, Mapping):
            return cls(header)
        return None


    def get(self, name: str) -> Any:
        return self._header.get(name, MISSING)


    def get_string(self, name: str) -> Optional[str]:
        value = self._header.get(name, MISSING)
        if isinstance(value, str):
            return value
        return None


    @property
    def algorithm(self) -> Optional[str]:
        return self.get_string(ALG)


    @property
    def key_id(self) -> Optional[str]:
        return self.get_string(KID)


    def __contains__(self, name):
        return name in self._header


    def __repr__(self):
        return f"HeaderView({dict(self._header)!r})"

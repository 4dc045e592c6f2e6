"""User names and their case-insensitive ids."""

from __future__ import annotations

import string

_ALLOWED = frozenset((string.ascii_letters + string.digits + "-_").encode("ascii"))
_MAX_LENGTH = 30


class InvalidUserName(ValueError):
    """Raised for text that is not a valid user name."""

    def __init__(self, message: str = "invalid username") -> None:
        super().__init__(message)


def _is_valid(data: bytes) -> bool:
    return 0 < len(data) <= _MAX_LENGTH and all(byte in _ALLOWED for byte in data)


class UserName:
    """A user name as written, compared without regard to ASCII case."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        if not _is_valid(name.encode("utf-8")):
            raise InvalidUserName()
        self._name = name

    @staticmethod
    def from_bytes(data: bytes) -> UserName:
        data = bytes(data)
        if not _is_valid(data):
            raise InvalidUserName()
        return UserName(data.decode("ascii"))

    @staticmethod
    def parse(text: str) -> UserName:
        return UserName.from_bytes(text.encode("utf-8"))

    def as_bytes(self) -> bytes:
        return self._name.encode("ascii")

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"UserName({self._name!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserName):
            return self._name.lower() == other._name.lower()
        if isinstance(other, UserId):
            return self._name.lower() == other.as_lowercase_str()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._name.lower())


class UserId:
    """The lower-case form of a user name."""

    __slots__ = ("_id",)

    def __init__(self, value: str) -> None:
        self._id = value.lower()

    @staticmethod
    def from_name(name: UserName) -> UserId:
        return UserId(str(name))

    def as_lowercase_str(self) -> str:
        return self._id

    def __str__(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"UserId({self._id!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserId):
            return self._id == other._id
        if isinstance(other, UserName):
            return other == self
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._id)
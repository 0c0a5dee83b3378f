__version__ = "1.0.0"

from typing import Union

PUBLIC_KEY = "public_key"
SECRET_KEY = "secret_key"
KEY_TYPES = (PUBLIC_KEY, SECRET_KEY)


class KeyHeader:
    """
    Identity of a single key, as gpg reports it.

    Headers are immutable. Two headers are equal when the fingerprint, id, type
    and the set of usernames match; the order of usernames is not significant.
    same_key() only compares fingerprints.
    """

    def __init__(self, fingerprint: str, usernames: Union[str, list[str], tuple], id: str, type: str):
        if type not in KEY_TYPES:
            raise ValueError("Invalid key type '%s', must be one of: %s" % (type, ", ".join(KEY_TYPES)))

        if isinstance(usernames, str):
            usernames = (usernames,)

        object.__setattr__(self, "_fingerprint", fingerprint)
        object.__setattr__(self, "_usernames", tuple(usernames))
        object.__setattr__(self, "_id", id)
        object.__setattr__(self, "_type", type)

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    @property
    def usernames(self) -> tuple:
        return self._usernames

    @property
    def identities(self) -> tuple:
        return self._usernames

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> str:
        return self._type

    def same_key(self, other: "KeyHeader") -> bool:
        return self.fingerprint == other.fingerprint

    def shares_username(self, other: "KeyHeader") -> bool:
        return bool(set(self.usernames) & set(other.usernames))

    def __setattr__(self, name, value):
        raise AttributeError("KeyHeader is immutable, cannot set: %s" % name)

    def __delattr__(self, name):
        raise AttributeError("KeyHeader is immutable, cannot delete: %s" % name)

    def __eq__(self, other):
        if not isinstance(other, KeyHeader):
            return NotImplemented
        return (
            self.fingerprint == other.fingerprint
            and set(self.usernames) == set(other.usernames)
            and self.id == other.id
            and self.type == other.type
        )

    def __hash__(self):
        return hash((self.fingerprint, frozenset(self.usernames), self.id, self.type))

    def __str__(self) -> str:
        return "fingerprint: %s, usernames: %s, id: %s, type: %s" % (
            self.fingerprint,
            list(self.usernames),
            self.id,
            self.type,
        )

    def __repr__(self) -> str:
        return "KeyHeader(%s)" % self

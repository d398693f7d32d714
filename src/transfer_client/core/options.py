"""
Transfer options: canonical identifiers, name resolution and the option set.

Option codes are the numeric values libcurl uses for ``CURLOPT_*``, so code
written against the curl option names can pass either the name or the number.
``RETURNTRANSFER`` and ``BINARYTRANSFER`` use the PHP extension's codes.
"""

from collections.abc import MutableMapping
from enum import IntEnum, IntFlag
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from .exceptions import ConfigurationError, UnknownOptionError


class Option(IntEnum):
    """Known transfer options."""

    PORT = 3
    TIMEOUT = 13
    VERBOSE = 41
    HEADER = 42
    NOBODY = 44
    FAILONERROR = 45
    POST = 47
    FOLLOWLOCATION = 52
    HTTPPROXYTUNNEL = 61
    SSL_VERIFYPEER = 64
    MAXREDIRS = 68
    CONNECTTIMEOUT = 78
    HTTPGET = 80
    SSL_VERIFYHOST = 81
    HTTPAUTH = 107
    TIMEOUT_MS = 155
    CONNECTTIMEOUT_MS = 156
    FILE = 10001
    URL = 10002
    PROXY = 10004
    USERPWD = 10005
    PROXYUSERPWD = 10006
    POSTFIELDS = 10015
    REFERER = 10016
    USERAGENT = 10018
    COOKIE = 10022
    HTTPHEADER = 10023
    SSLCERT = 10025
    CUSTOMREQUEST = 10036
    CAINFO = 10065
    SSLKEY = 10087
    ENCODING = 10102
    SSH_KNOWNHOSTS = 10183
    RETURNTRANSFER = 19913
    BINARYTRANSFER = 19914


# Alternative spellings accepted by libcurl itself
_ALIASES: Dict[str, Option] = {
    "WRITEDATA": Option.FILE,
    "ACCEPT_ENCODING": Option.ENCODING,
    "CAINFO_PATH": Option.CAINFO,
}

_PREFIX = "CURLOPT_"


class AuthType(IntFlag):
    """HTTP authentication methods (``CURLAUTH_*`` bits)."""

    NONE = 0
    BASIC = 1
    DIGEST = 2
    GSSNEGOTIATE = 4
    NTLM = 8
    DIGEST_IE = 16
    NTLM_WB = 32
    BEARER = 64
    ANY = BASIC | DIGEST | GSSNEGOTIATE | NTLM | NTLM_WB | BEARER
    ANYSAFE = DIGEST | GSSNEGOTIATE | NTLM | NTLM_WB | BEARER


OptionKey = Union[Option, int, str]


def resolve_option(code: OptionKey) -> Option:
    """
    Resolve an option name or code to its canonical :class:`Option`.

    Accepts ``Option`` members, ints, numeric strings and names in any case,
    with or without the ``CURLOPT_`` prefix.

    Raises:
        UnknownOptionError: If the name or code is not recognized

    Example:
        >>> resolve_option("timeout")
        <Option.TIMEOUT: 13>
        >>> resolve_option("CURLOPT_FollowLocation")
        <Option.FOLLOWLOCATION: 52>
        >>> resolve_option(10023)
        <Option.HTTPHEADER: 10023>
    """
    if isinstance(code, Option):
        return code

    if isinstance(code, bool):
        raise UnknownOptionError(code)

    if isinstance(code, int):
        try:
            return Option(code)
        except ValueError:
            raise UnknownOptionError(code) from None

    if isinstance(code, str):
        name = code.strip()
        if name.lstrip("-").isdigit():
            return resolve_option(int(name))

        name = name.upper()
        if name.startswith(_PREFIX):
            name = name[len(_PREFIX):]

        if name in _ALIASES:
            return _ALIASES[name]
        try:
            return Option[name]
        except KeyError:
            raise UnknownOptionError(code) from None

    raise UnknownOptionError(code)


def resolve_auth_type(auth_type: Union[AuthType, int, str]) -> AuthType:
    """
    Resolve an auth type name (``"any"``, ``"basic"``, ``"CURLAUTH_DIGEST"``...).

    Raises:
        ConfigurationError: If the name is not a known auth type
    """
    if isinstance(auth_type, AuthType):
        return auth_type
    if isinstance(auth_type, int) and not isinstance(auth_type, bool):
        return AuthType(auth_type)

    name = str(auth_type).strip().upper()
    if name.startswith("CURLAUTH_"):
        name = name[len("CURLAUTH_"):]
    try:
        return AuthType[name]
    except KeyError:
        raise ConfigurationError(f"Unknown HTTP auth type: {auth_type!r}") from None


class OptionSet(MutableMapping):
    """
    Mapping of transfer options keyed by canonical :class:`Option`.

    Every key is resolved on the way in, so ``"timeout"``, ``"CURLOPT_TIMEOUT"``,
    ``13`` and ``Option.TIMEOUT`` address the same entry. ``update`` is a
    sequence of single-key upserts: later values win, untouched keys stay.

    Example:
        >>> options = OptionSet({"timeout": 10})
        >>> options.update({"TIMEOUT": 5, "verbose": True})
        >>> options[Option.TIMEOUT]
        5
    """

    def __init__(self, initial: Optional[Mapping[OptionKey, Any]] = None):
        self._data: Dict[Option, Any] = {}
        if initial:
            self.update(initial)

    def __getitem__(self, key: OptionKey) -> Any:
        return self._data[resolve_option(key)]

    def __setitem__(self, key: OptionKey, value: Any) -> None:
        self._data[resolve_option(key)] = value

    def __delitem__(self, key: OptionKey) -> None:
        del self._data[resolve_option(key)]

    def __contains__(self, key: object) -> bool:
        try:
            return resolve_option(key) in self._data  # type: ignore[arg-type]
        except UnknownOptionError:
            return False

    def __iter__(self) -> Iterator[Option]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{key.name}={value!r}" for key, value in self._data.items())
        return f"OptionSet({items})"

    def copy(self) -> "OptionSet":
        return OptionSet(self._data)

    def as_dict(self) -> Dict[Option, Any]:
        """Plain dict copy."""
        return dict(self._data)

    def by_name(self) -> Dict[str, Any]:
        """Copy keyed by option name, for logging and diagnostics."""
        return {key.name: value for key, value in self._data.items()}

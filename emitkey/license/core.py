"""Parsing of licenses of any version and generation of new ones."""

from __future__ import annotations

from typing import Callable, Union

from .v1 import V1
from .v2 import V2
from .v3 import V3

License = Union[V1, V2, V3]

_MISSING = (
    "No license was found, please provide a valid license key through the "
    "configuration file, an EMITTER_LICENSE environment variable or a valid "
    "vault key 'secrets/emitter/license'"
)

_PARSERS: dict[str, Callable[[str], License]] = {
    ":1": V1.parse,
    ":2": V2.parse,
    ":3": V3.parse,
}


class LicenseError(ValueError):
    """Raised when a license is missing or cannot be decoded."""


def parse(data: str) -> License:
    """Parse a license of any version; unsuffixed data is read as version 1."""
    if len(data) < 5:
        raise LicenseError(_MISSING)

    parser = _PARSERS.get(data[-2:])
    try:
        if parser is None:
            return V1.parse(data)
        return parser(data[:-2])
    except ValueError as error:
        raise LicenseError(str(error)) from error


def new() -> tuple[str, str]:
    """Generate a new license and its encrypted master key."""
    license_ = V3.generate()
    secret = license_.new_master_key(1)
    master = license_.cipher().encrypt_key(secret)
    return str(license_), master
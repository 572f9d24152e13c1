"""Parsing of channel strings of the form ``key/a/b/c/?opt=value&...``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from . import murmur

MIN_TIME = 1514764800  # 2018
MAX_TIME = 3029529600  # 2066

_SEPARATOR = ord("/")
_QUESTION = ord("?")
_WILDCARDS = frozenset(b"#+*")
_OPTION = re.compile(rb"([0-9A-Za-z]+)=([0-9A-Za-z]+)")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class ChannelType(IntEnum):
    """The kind of a parsed channel."""

    INVALID = 0
    STATIC = 1
    WILDCARD = 2


@dataclass(frozen=True)
class ChannelOption:
    """A single ``key=value`` option of a channel."""

    key: str
    value: str


def _is_channel_char(symbol: int) -> bool:
    return 45 <= symbol <= 58 or 65 <= symbol <= 122 or symbol == 36


def _to_time(seconds: int) -> datetime:
    if seconds < MIN_TIME or seconds > MAX_TIME:
        return _EPOCH
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


@dataclass
class Channel:
    """A parsed channel: key, channel path, hashed query and options."""

    key: bytes = b""
    channel: bytes = b""
    query: list[int] = field(default_factory=list)
    options: list[ChannelOption] = field(default_factory=list)
    channel_type: ChannelType = ChannelType.INVALID

    def target(self) -> int:
        """Return the hash of the first channel segment."""
        return self.query[0]

    def ttl(self) -> tuple[int, bool]:
        """Return the ``ttl`` option and whether it was present and valid."""
        return self._option("ttl")

    def last(self) -> tuple[int, bool]:
        """Return the ``last`` option and whether it was present and valid."""
        return self._option("last")

    def exclude(self) -> bool:
        """Return True when the ``me=0`` option is set."""
        value, ok = self._option("me")
        return ok and value == 0

    def window(self) -> tuple[datetime, datetime]:
        """Return the ``from``/``until`` options as UTC datetimes.

        Values outside the supported range come back as the Unix epoch.
        """
        start, _ = self._option("from")
        end, _ = self._option("until")
        return _to_time(start), _to_time(end)

    def safe_string(self) -> str:
        """Return the channel and its options without the key."""
        text = self.channel.decode("utf-8", "surrogateescape")
        if not self.options:
            return text
        return text + "?" + "&".join(f"{o.key}={o.value}" for o in self.options)

    def __str__(self) -> str:
        return self.key.decode("utf-8", "surrogateescape") + "/" + self.safe_string()

    def _option(self, name: str) -> tuple[int, bool]:
        for option in self.options:
            if option.key == name:
                if _INTEGER.fullmatch(option.value):
                    value = int(option.value)
                    if _INT64_MIN <= value <= _INT64_MAX:
                        return value, True
                return 0, False
        return 0, False

    def _parse_path(self, text: bytes) -> int:
        """Parse the channel path; return the number of bytes consumed."""
        start = 0
        chars = 0
        wildcards = 0
        for i, symbol in enumerate(text):
            if symbol == _SEPARATOR:
                if chars == 0 and wildcards == 0:
                    self.channel_type = ChannelType.INVALID
                    return i
                self.query.append(murmur.of(text[start:i]))

                end = i + 1
                if end == len(text) or text[end] == _QUESTION:
                    self.channel = text[:end]
                    if self.channel_type != ChannelType.WILDCARD:
                        self.channel_type = ChannelType.STATIC
                    return end if end == len(text) else end + 1

                start = end
                chars = 0
                wildcards = 0
            elif symbol in _WILDCARDS:
                if chars > 0 or wildcards > 0:
                    self.channel_type = ChannelType.INVALID
                    return i
                wildcards += 1
                self.channel_type = ChannelType.WILDCARD
            elif _is_channel_char(symbol):
                if wildcards > 0:
                    self.channel_type = ChannelType.INVALID
                    return i
                chars += 1
            else:
                self.channel_type = ChannelType.INVALID
                return i

        self.channel_type = ChannelType.INVALID
        return len(text)

    def _parse_options(self, text: bytes) -> bool:
        """Parse ``key=value&...`` options; return False when malformed."""
        if text.endswith(b"&"):
            text = text[:-1]
        for piece in text.split(b"&"):
            match = _OPTION.fullmatch(piece)
            if match is None:
                return False
            key, value = match.groups()
            self.options.append(ChannelOption(key.decode("ascii"), value.decode("ascii")))
        return True


def parse_channel(text: bytes | str) -> Channel:
    """Parse a ``key/channel/?options`` string into a Channel.

    Malformed input yields a channel whose type is ``ChannelType.INVALID``.
    """
    if isinstance(text, str):
        text = text.encode("utf-8")
    text = bytes(text)

    channel = Channel()
    separator = text.find(b"/")
    if separator <= 0:
        return channel

    channel.key = text[:separator]
    offset = separator + 1
    offset += channel._parse_path(text[offset:])
    if channel.channel_type == ChannelType.INVALID:
        return channel

    if offset < len(text) and not channel._parse_options(text[offset:]):
        channel.channel_type = ChannelType.INVALID
    return channel


def make_channel(key: str, channel_with_options: str) -> Channel:
    """Parse a channel from a separate key and channel string."""
    return parse_channel(f"{key}/{channel_with_options}")
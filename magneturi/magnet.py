"""
Magnet URI parsing, normalization and encoding.

Provides the Magnet class holding the parsed components of a magnet URI
(exact topics, display name, length, trackers, sources, keywords, manifest
and any unrecognized parameters) and the three codec operations:

- parse(): raw URI string -> Magnet
- normalize(): sort every multi-valued field in place
- encode(): Magnet -> URI string

Fields differ in how they are escaped. xt, kt and mt values are stored and
emitted raw; dn, tr, as and xs are percent-decoded on parse and
percent-encoded on output. Unrecognized parameters are decoded on parse but
emitted raw.

Custom exceptions:
- MagnetError: Base exception for all magnet URI errors
- MissingPrefixError: Raised when the URI does not start with 'magnet:?'
- InvalidEncodingError: Raised when a value has malformed percent-encoding
- InvalidLengthError: Raised when xl is not a non-negative 64-bit integer
"""

import re
from base64 import b32decode
from binascii import Error as Base32Error
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from urllib.parse import quote_plus, unquote_to_bytes

from .logger import logger


MAGNET_PREFIX = "magnet:?"
BTIH_PREFIX = "urn:btih:"

INT64_MAX = 2**63 - 1

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_DECIMAL = re.compile(r"[+-]?[0-9]+")


class MagnetError(ValueError):
    """Base exception for magnet URI errors."""
    pass


class MissingPrefixError(MagnetError):
    """Raised when the URI does not start with 'magnet:?'."""
    pass


class InvalidEncodingError(MagnetError):
    """Raised when a percent-encoded value cannot be decoded."""
    pass


class InvalidLengthError(MagnetError):
    """Raised when the xl parameter is not a valid length."""
    pass


def unescape(value: str) -> str:
    """
    Decode a percent-encoded query value.

    '+' decodes to a space and every '%' must start a two-digit hex escape.
    Bytes that are not valid UTF-8 are kept as surrogates so escape() can
    restore them.

    Raises:
        InvalidEncodingError: If the value is malformed
    """
    match = _MALFORMED_ESCAPE.search(value)
    if match:
        raise InvalidEncodingError(
            f"Invalid escape {value[match.start():match.start() + 3]!r} in {value!r}"
        )
    return unquote_to_bytes(value.replace("+", " ")).decode("utf-8", errors="surrogateescape")


def escape(value: str) -> str:
    """Percent-encode a value for use in a query string ('+' for spaces)."""
    return quote_plus(value, safe="", errors="surrogateescape")


def parse_length(value: str) -> int:
    """
    Parse an xl value as a base-10, non-negative 64-bit integer.

    Raises:
        InvalidLengthError: If the value is not a valid length
    """
    if not _DECIMAL.fullmatch(value):
        raise InvalidLengthError(f"Invalid exact length: {value!r}")
    digits = value.lstrip("+-").lstrip("0")
    if len(digits) > len(str(INT64_MAX)):
        raise InvalidLengthError(f"Exact length out of range: {value!r}")
    try:
        size = int(digits or "0")
    except ValueError as e:
        raise InvalidLengthError(f"Invalid exact length: {value!r}") from e
    if value.startswith("-") and size:
        raise InvalidLengthError(f"Exact length must not be negative: {value!r}")
    if size > INT64_MAX:
        raise InvalidLengthError(f"Exact length out of range: {value!r}")
    return size


@dataclass
class Magnet:
    """Parsed representation of a magnet URI."""

    exact_topics: List[str] = field(default_factory=list)
    display_name: str = ""
    exact_length: int = 0
    trackers: List[str] = field(default_factory=list)
    acceptable_sources: List[str] = field(default_factory=list)
    exact_source: List[str] = field(default_factory=list)
    keyword_topic: List[str] = field(default_factory=list)
    manifest_topic: str = ""
    extra: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def parse(cls, raw: str) -> "Magnet":
        return parse(raw)

    def normalize(self) -> None:
        normalize(self)

    def encode(self) -> str:
        return encode(self)

    def __str__(self):
        return encode(self)

    def info_hash(self) -> Optional[str]:
        """
        Return the BitTorrent info hash as upper-case hex.

        Uses the first exact topic in 'urn:btih:' form. Base32 hashes
        (32 characters) are converted to hex. Returns None when there is
        no usable btih topic.
        """
        for topic in self.exact_topics:
            if not topic.lower().startswith(BTIH_PREFIX):
                continue
            value = topic[len(BTIH_PREFIX):]
            if len(value) == 40 and re.fullmatch(r"[0-9A-Fa-f]{40}", value):
                return value.upper()
            if len(value) == 32:
                try:
                    return b32decode(value, casefold=True).hex().upper()
                except Base32Error:
                    logger.debug(f"Ignoring malformed base32 topic {topic!r}")
        return None

    def add_tracker(self, tracker: str) -> None:
        if tracker not in self.trackers:
            self.trackers.append(tracker)

    def remove_tracker(self, tracker: str) -> None:
        if tracker in self.trackers:
            self.trackers.remove(tracker)


class _ParseState:
    """Accumulates parameters while scanning a URI."""

    def __init__(self):
        self.magnet = Magnet()
        self.exact_topics = set()
        self.trackers = set()
        self.acceptable_sources = set()

    def finish(self) -> Magnet:
        self.magnet.exact_topics = list(self.exact_topics)
        self.magnet.trackers = list(self.trackers)
        self.magnet.acceptable_sources = list(self.acceptable_sources)
        return self.magnet


def _display_name(state: _ParseState, value: str) -> None:
    state.magnet.display_name = unescape(value)


def _exact_topic(state: _ParseState, value: str) -> None:
    state.exact_topics.add(value)


def _keyword_topic(state: _ParseState, value: str) -> None:
    state.magnet.keyword_topic.extend(value.split("+"))


def _manifest_topic(state: _ParseState, value: str) -> None:
    state.magnet.manifest_topic = value


def _tracker(state: _ParseState, value: str) -> None:
    state.trackers.add(unescape(value))


def _acceptable_source(state: _ParseState, value: str) -> None:
    state.acceptable_sources.add(unescape(value))


def _exact_length(state: _ParseState, value: str) -> None:
    state.magnet.exact_length = parse_length(value)


def _exact_source(state: _ParseState, value: str) -> None:
    state.magnet.exact_source.append(unescape(value))


# Recognized keys; anything else is collected into Magnet.extra
_HANDLERS: Dict[str, Callable[[_ParseState, str], None]] = {
    "dn": _display_name,
    "xt": _exact_topic,
    "kt": _keyword_topic,
    "mt": _manifest_topic,
    "tr": _tracker,
    "as": _acceptable_source,
    "xl": _exact_length,
    "xs": _exact_source,
}

RECOGNIZED_KEYS = frozenset(_HANDLERS)


def is_magnet(raw) -> bool:
    """Check whether a value looks like a magnet URI."""
    return isinstance(raw, str) and raw.startswith(MAGNET_PREFIX)


def parse(raw: str) -> Magnet:
    """
    Parse a magnet URI into a Magnet.

    Parameters without '=' or with an empty value are skipped. Only the
    first '=' separates key from value.

    Raises:
        MissingPrefixError: If raw does not start with 'magnet:?'
        InvalidEncodingError: If a decoded field has malformed escapes
        InvalidLengthError: If xl is not a valid length
    """
    if not is_magnet(raw):
        logger.debug(f"Rejected URI without magnet prefix: {raw!r}")
        raise MissingPrefixError(f"Magnet URI prefix not found: {raw!r}")

    state = _ParseState()
    for param in raw[len(MAGNET_PREFIX):].split("&"):
        key, sep, value = param.partition("=")
        if not sep or not value:
            continue

        handler = _HANDLERS.get(key)
        if handler is not None:
            handler(state, value)
        else:
            state.magnet.extra.setdefault(key, []).append(unescape(value))

    magnet = state.finish()
    logger.debug(
        f"Parsed magnet with {len(magnet.exact_topics)} topics, "
        f"{len(magnet.trackers)} trackers, {len(magnet.extra)} extra keys"
    )
    return magnet


def normalize(magnet: Magnet) -> None:
    """Sort every multi-valued field of the magnet in place."""
    magnet.exact_topics.sort()
    magnet.trackers.sort()
    magnet.acceptable_sources.sort()
    magnet.exact_source.sort()
    magnet.keyword_topic.sort()
    for values in magnet.extra.values():
        values.sort()


def encode(magnet: Magnet) -> str:
    """
    Render a Magnet as a URI string.

    dn is always emitted first. Extra keys are emitted in sorted order so
    the output is reproducible.
    """
    parts = [f"dn={escape(magnet.display_name)}"]

    parts.extend(f"xt={xt}" for xt in magnet.exact_topics)

    if magnet.exact_length > 0:
        parts.append(f"xl={magnet.exact_length}")

    parts.extend(f"tr={escape(tr)}" for tr in magnet.trackers)
    parts.extend(f"as={escape(source)}" for source in magnet.acceptable_sources)
    parts.extend(f"xs={escape(xs)}" for xs in magnet.exact_source)

    if magnet.keyword_topic:
        parts.append(f"kt={'+'.join(magnet.keyword_topic)}")

    if magnet.manifest_topic:
        parts.append(f"mt={magnet.manifest_topic}")

    for key in sorted(magnet.extra):
        parts.extend(f"{key}={value}" for value in magnet.extra[key])

    return f"{MAGNET_PREFIX}{'&'.join(parts)}"

"""
Magnet URI - Parse, normalize and encode magnet links.

Provides a codec for the query-string shaped magnet URIs used by
peer-to-peer file-sharing systems to reference content by hash, tracker
and metadata.
"""

from .config import Config
from .magnet import (
    InvalidEncodingError,
    InvalidLengthError,
    Magnet,
    MagnetError,
    MissingPrefixError,
    encode,
    is_magnet,
    normalize,
    parse,
)
from .torrent_file import TorrentFile, TorrentFileError

__version__ = "0.1.0"
__all__ = [
    "Config",
    "Magnet",
    "MagnetError",
    "MissingPrefixError",
    "InvalidEncodingError",
    "InvalidLengthError",
    "TorrentFile",
    "TorrentFileError",
    "parse",
    "normalize",
    "encode",
    "is_magnet",
]

"""
Build magnet links from .torrent metainfo files.

Provides the TorrentFile class which reads a bencoded torrent file,
computes its info hash and produces the equivalent Magnet.

Custom exceptions:
- TorrentFileError: Base exception for all torrent file errors
- InvalidTorrentFileError: Raised when file is not valid bencode format
- MissingRequiredKeyError: Raised when required keys are missing
"""

import hashlib

import bencodepy

from .logger import logger
from .magnet import BTIH_PREFIX, Magnet


class TorrentFileError(Exception):
    """Base exception for torrent file parsing errors."""
    pass


class InvalidTorrentFileError(TorrentFileError):
    """Raised when torrent file is not valid bencode format."""
    pass


class MissingRequiredKeyError(TorrentFileError):
    """Raised when torrent file is missing required keys."""
    pass


def _text(value):
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class TorrentFile:
    def __init__(self, torrent_path):
        try:
            with open(torrent_path, 'rb') as f:
                file_content = f.read()
        except FileNotFoundError:
            raise TorrentFileError(f"Torrent file not found: {torrent_path}")
        except PermissionError:
            raise TorrentFileError(f"Permission denied reading torrent file: {torrent_path}")
        except OSError as e:
            raise TorrentFileError(f"Failed to read torrent file: {e}")

        try:
            self.torrent_data = bencodepy.decode(file_content)
        except bencodepy.DecodingError as e:
            raise InvalidTorrentFileError(f"Invalid bencode format: {e}")
        except Exception as e:
            raise InvalidTorrentFileError(f"Failed to decode torrent file: {e}") from e

        if not isinstance(self.torrent_data, dict):
            raise InvalidTorrentFileError("Torrent data is not a dictionary")

        if b'info' not in self.torrent_data:
            raise MissingRequiredKeyError("Torrent file missing required 'info' dictionary")

        # Raw info is kept as decoded so the hash is taken over the original bytes
        self.info = self.torrent_data[b'info']
        if not isinstance(self.info, dict):
            raise InvalidTorrentFileError("'info' field is not a dictionary")

        self.is_multi_file = b'files' in self.info
        logger.debug(f"Loaded torrent file {torrent_path}")

    def name(self):
        return _text(self.info.get(b'name', b''))

    def info_hash(self):
        return hashlib.sha1(bencodepy.encode(self.info)).hexdigest().upper()

    def size(self):
        if self.is_multi_file:
            return sum(file[b'length'] for file in self.info[b'files'])
        return self.info.get(b'length', 0)

    def trackers(self):
        if b'announce-list' in self.torrent_data:
            return [_text(tracker) for tier in self.torrent_data[b'announce-list'] for tracker in tier]
        elif b'announce' in self.torrent_data:
            return [_text(self.torrent_data[b'announce'])]
        else:
            return []

    def magnet(self):
        """Return the Magnet referencing this torrent."""
        magnet = Magnet(
            exact_topics=[f"{BTIH_PREFIX}{self.info_hash()}"],
            display_name=self.name(),
            exact_length=self.size(),
        )
        for tracker in self.trackers():
            magnet.add_tracker(tracker)
        return magnet

    def magnet_link(self):
        return self.magnet().encode()

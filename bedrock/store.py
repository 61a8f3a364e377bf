#!/usr/bin/python3

"""Key-value stores that world records can be read from.

The decoding functions in bedrock.world do not open or manage a world's
LevelDB themselves. They accept any store object that provides

    store.get(key) -> bytes or None
    iter(store) -> (key, value) pairs in ascending order of the raw key bytes

An open plyvel.DB satisfies this as it is. The adapters below provide the same
interface for data that is already in memory or that was dumped to disk.
"""

import logging
import os
from binascii import hexlify, unhexlify, Error as HexError

logger = logging.getLogger(__name__)

DUMP_PREFIX, DUMP_SUFFIX = 'raw-', '.dat'


class MappingStore:
    """Serve records from a mapping of key bytes to value bytes."""

    def __init__(self, records=()):
        """Initialise a store from a mapping or (key, value) pairs."""
        self.records = {bytes(k): bytes(v) for k, v in dict(records).items()}

    def get(self, key):
        """Return the value stored at key, or None."""
        return self.records.get(bytes(key))

    def __iter__(self):
        for key in sorted(self.records):
            yield key, self.records[key]

    def __len__(self):
        return len(self.records)


def dump_filename(key):
    """Return the file name a record with the given key is dumped to."""
    return DUMP_PREFIX + hexlify(key).decode('ascii') + DUMP_SUFFIX


def dump_record(directory, key, value):
    """Write one record's raw value to a file in directory.

    This is meant as an observability hook, e.g. passed as on_record to
    bedrock.world.get_subchunks. The file name encodes the key, so a
    DumpDirectoryStore can read the records back.
    """
    path = os.path.join(directory, dump_filename(key))
    logger.info('writing record to %s', path)
    with open(path, 'wb') as dump:
        dump.write(value)


class DumpDirectoryStore:
    """Serve records from a directory of files written by dump_record.

    Files whose names are not raw-<hex key>.dat are ignored.
    """

    def __init__(self, directory):
        """Index the records in directory. Contents are read on demand."""
        self.directory = directory
        self.paths = {}
        for name in os.listdir(directory):
            if not (name.startswith(DUMP_PREFIX) and
                    name.endswith(DUMP_SUFFIX)):
                continue
            try:
                key = unhexlify(name[len(DUMP_PREFIX):-len(DUMP_SUFFIX)])
            except (HexError, ValueError):
                logger.debug('ignoring %s: not a hex-encoded key', name)
                continue
            self.paths[key] = os.path.join(directory, name)

    def _read(self, key):
        with open(self.paths[key], 'rb') as dump:
            return dump.read()

    def get(self, key):
        """Return the value stored at key, or None."""
        key = bytes(key)
        if key not in self.paths:
            return None
        return self._read(key)

    def __iter__(self):
        for key in sorted(self.paths):
            yield key, self._read(key)

    def __len__(self):
        return len(self.paths)

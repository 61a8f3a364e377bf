#!/usr/bin/python3

"""Errors raised while decoding world records.

Every error is a ValueError, so callers that only care about "this record is
bad" can catch that. A missing record is never an error: lookups return None.
"""


def _restore(cls, args):
    """Create an unpickled error without running its __init__."""
    return cls.__new__(cls, *args)


class DecodeError(ValueError):
    """A record could not be decoded.

    column and index identify the record (either may be None when the
    decoder was called on bare bytes).
    """

    def __init__(self, message, column=None, index=None):
        super().__init__(message)
        self.message, self.column, self.index = message, column, index

    def __reduce__(self):
        # Subclasses take other arguments than args holds; restore the
        # attributes directly instead of calling __init__ again.
        return _restore, (type(self), self.args), self.__dict__

    def __str__(self):
        where = []
        if self.column is not None:
            where.append('column ({}, {})'.format(*self.column))
        if self.index is not None:
            where.append('sub-chunk {}'.format(self.index))
        if not where:
            return self.message
        return '{}: {}'.format(', '.join(where), self.message)

    def locate(self, column=None, index=None):
        """Fill in the record's location if it is not known yet."""
        if self.column is None:
            self.column = column
        if self.index is None:
            self.index = index
        return self


class TruncatedRecord(DecodeError):
    """A record holds fewer bytes than its format requires."""

    def __init__(self, what, needed, available, column=None, index=None):
        super().__init__('truncated {}: need {} bytes, {} available'
                         .format(what, needed, available), column, index)
        self.needed, self.available = needed, available


class UnsupportedVersion(DecodeError):
    """A sub-chunk record's version byte is not understood."""

    def __init__(self, version, column=None, index=None):
        super().__init__('unsupported sub-chunk version {}'.format(version),
                         column, index)
        self.version = version


class UnsupportedBitWidth(DecodeError):
    """A sub-chunk's bits-per-block-pair field is not one of 6, 8, 10, 12."""

    def __init__(self, bits_per_block_pair, column=None, index=None):
        super().__init__('unsupported bits per block pair: {}'
                         .format(bits_per_block_pair), column, index)
        self.bits_per_block_pair = bits_per_block_pair


class InvalidIndex(DecodeError):
    """A caller asked for a sub-chunk index outside 0..15."""

    def __init__(self, index, column=None):
        super().__init__('sub-chunk index must be in 0..15, got {}'
                         .format(index), column)
        self.index = index

import re
from functools import lru_cache

from ._constants import (
    CIGAR_KIND,
    CIGAR_OPS,
    OP_DELETION,
    OP_INSERTION,
    OP_MATCH,
)

_CIGAR_RE = re.compile(r"(\d+)([%s])" % re.escape(CIGAR_OPS))


class MalformedEncodingError(ValueError):
    """A CIGAR string without a single recognisable operation."""


def parse_cigar(cigar):
    """Lazily extract operations from a CIGAR string.

    Parameters
    ----------
    cigar : str
        CIGAR string, e.g. "10M2I3D5M".

    Yields
    ------
    tuple of (int, str)
        The run length and the operation kind (OP_MATCH, OP_INSERTION,
        OP_DELETION or OP_OTHER) in left to right order.

    Raises
    ------
    MalformedEncodingError
        If the string is not empty but contains no valid operation. The error
        surfaces when the stream is exhausted without having produced anything.

    Notes
    -----
    Anything that is not a <length><operation> token is skipped, including
    trailing content. The stream can only be consumed once.

    """
    found = False
    for match in _CIGAR_RE.finditer(cigar):
        found = True
        yield int(match.group(1)), CIGAR_KIND[match.group(2)]

    if not found and cigar.strip():
        raise MalformedEncodingError(f"No valid CIGAR operations in {cigar!r}")


@lru_cache(maxsize=128)
def cigar_to_lens(cigar):
    """Extract the query and target spans of a CIGAR string.

    Only operations which move a cursor when counting aligned bases are
    considered: match/mismatch consume both sequences, insertions only the
    query and deletions only the target.

    Parameters
    ----------
    cigar : str
        CIGAR string.

    Returns
    -------
    int
        Number of query bases consumed.
    int
        Number of target bases consumed.

    Notes
    -----
    High-frequency CIGAR strings (e.g., "150M") benefit from the LRU cache.

    """
    query, target = 0, 0
    for length, kind in parse_cigar(cigar):
        if kind == OP_MATCH:
            query += length
            target += length
        elif kind == OP_INSERTION:
            query += length
        elif kind == OP_DELETION:
            target += length
    return query, target

import math
from collections import namedtuple

from ._cigar import parse_cigar
from ._constants import (
    OP_DELETION,
    OP_INSERTION,
    OP_MATCH,
    STRAND_REVERSE,
)

AlignmentRecord = namedtuple(
    "AlignmentRecord",
    ["query_name", "query_start", "query_end", "query_strand",
     "target_name", "target_start", "target_end", "cigar"],
)

FeatureInterval = namedtuple(
    "FeatureInterval", ["seq_name", "start", "end", "name", "strand"]
)

OverlapResult = namedtuple(
    "OverlapResult",
    ["aligned",
     "not_aligned_in_query", "not_aligned_in_target",
     "indels_in_query", "indels_in_target",
     "ignored_in_query", "ignored_in_target"],
)


def feature_length(feature):
    return feature.end - feature.start


def overlap_forward(pos, length, start, end):
    """Bases of [pos, pos + length) within [start, end)."""
    return max(0, min(pos + length, end) - max(pos, start))


def overlap_reverse(pos, length, start, end):
    """Bases of [pos - length, pos) within [start, end)."""
    return max(0, min(pos, end) - max(pos - length, start))


class Cursor:
    """Walk positions on the query and the target simultaneously.

    The target is always walked forward. The query is walked from its end
    towards its start when the query aligns on the reverse strand.
    """

    def __init__(self, record):
        self.reverse = record.query_strand == STRAND_REVERSE
        if self.reverse:
            self.query_pos = record.query_end
        else:
            self.query_pos = record.query_start
        self.target_pos = record.target_start

    def query_overlap(self, length, feature):
        if self.reverse:
            return overlap_reverse(self.query_pos, length,
                                   feature.start, feature.end)
        else:
            return overlap_forward(self.query_pos, length,
                                   feature.start, feature.end)

    def target_overlap(self, length, feature):
        return overlap_forward(self.target_pos, length,
                               feature.start, feature.end)

    def advance_query(self, length):
        if self.reverse:
            self.query_pos -= length
        else:
            self.query_pos += length

    def advance_target(self, length):
        self.target_pos += length

    def passed(self, feature_query, feature_target):
        """Test whether both cursors have moved beyond the feature."""
        if self.reverse:
            query_passed = self.query_pos <= feature_query.start
        else:
            query_passed = self.query_pos >= feature_query.end
        return query_passed and self.target_pos >= feature_target.end


def count_aligned_bases(record, feature_query, feature_target,
                        max_indel_size=None):
    """Classify the bases of a feature by how they align.

    Parameters
    ----------
    record : AlignmentRecord
        The query to target alignment.
    feature_query : FeatureInterval
        The feature in query coordinates.
    feature_target : FeatureInterval
        The same feature in target coordinates.
    max_indel_size : int, optional
        Insertions and deletions no longer than this are counted as indels,
        longer ones as not aligned. None places no limit.

    Returns
    -------
    OverlapResult
        The classified base counts.

    Notes
    -----
    A match/mismatch run contributes the smaller of its query and target
    overlaps with the feature. The whole length of an insertion or deletion
    run decides between indel and not aligned, even if only part of the run
    overlaps the feature.

    The walk stops as soon as both cursors have passed the feature. Bases
    the walk did not classify end up as ignored, computed as the remainder of
    the feature length. Ignored counts are not clamped and may be negative.

    Operations other than M, =, X, I and D move neither cursor.

    """
    if max_indel_size is None:
        max_indel_size = math.inf

    aligned = 0
    not_aligned_in_query = 0
    not_aligned_in_target = 0
    indels_in_query = 0
    indels_in_target = 0

    cursor = Cursor(record)
    for length, kind in parse_cigar(record.cigar):
        if kind == OP_MATCH:
            aligned += min(cursor.query_overlap(length, feature_query),
                           cursor.target_overlap(length, feature_target))
            cursor.advance_query(length)
            cursor.advance_target(length)
        elif kind == OP_DELETION:
            overlap = cursor.target_overlap(length, feature_target)
            if length <= max_indel_size:
                indels_in_target += overlap
            else:
                not_aligned_in_target += overlap
            cursor.advance_target(length)
        elif kind == OP_INSERTION:
            overlap = cursor.query_overlap(length, feature_query)
            if length <= max_indel_size:
                indels_in_query += overlap
            else:
                not_aligned_in_query += overlap
            cursor.advance_query(length)

        if cursor.passed(feature_query, feature_target):
            break

    ignored_in_query = (feature_length(feature_query) - aligned
                        - indels_in_query - not_aligned_in_query)
    ignored_in_target = (feature_length(feature_target) - aligned
                         - indels_in_target - not_aligned_in_target)

    return OverlapResult(aligned,
                         not_aligned_in_query, not_aligned_in_target,
                         indels_in_query, indels_in_target,
                         ignored_in_query, ignored_in_target)

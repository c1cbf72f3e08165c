STRAND_FORWARD = '+'
STRAND_REVERSE = '-'

CIGAR_TAG = 'cg:Z:'

# SAM CIGAR alphabet; only match/mismatch, insertion and deletion move the
# cursors, everything else is recognised but contributes nothing.
OP_MATCH = 'M'
OP_INSERTION = 'I'
OP_DELETION = 'D'
OP_OTHER = 'other'
CIGAR_OPS = 'MIDNSHP=X'
CIGAR_KIND = {'M': OP_MATCH,
              '=': OP_MATCH,
              'X': OP_MATCH,
              'I': OP_INSERTION,
              'D': OP_DELETION,
              'N': OP_OTHER,
              'S': OP_OTHER,
              'H': OP_OTHER,
              'P': OP_OTHER}

COLUMN_FEATURE_NAME = 'feature.name'
COLUMN_FEATURE_NAME_DTYPE = str
COLUMN_QUERY = 'query'
COLUMN_QUERY_DTYPE = str
COLUMN_QUERY_FEATURE_START = 'query.feature.start'
COLUMN_QUERY_FEATURE_STOP = 'query.feature.end'
COLUMN_QUERY_STRAND = 'query.strand'
COLUMN_QUERY_STRAND_DTYPE = str
COLUMN_TARGET = 'target'
COLUMN_TARGET_DTYPE = str
COLUMN_TARGET_FEATURE_START = 'target.feature.start'
COLUMN_TARGET_FEATURE_STOP = 'target.feature.end'
COLUMN_POSITION_DTYPE = int
COLUMN_ALIGNED = 'aligned.bp'
COLUMN_NOT_ALIGNED_QUERY = 'not.aligned.in.query.bp'
COLUMN_NOT_ALIGNED_TARGET = 'not.aligned.in.target.bp'
COLUMN_INDELS_QUERY = 'indels.in.query.bp'
COLUMN_INDELS_TARGET = 'indels.in.target.bp'
COLUMN_IGNORED_QUERY = 'ignored.in.query.bp'
COLUMN_IGNORED_TARGET = 'ignored.in.target.bp'
COLUMN_COUNT_DTYPE = int


class _SCHEMA:
    def __init__(self):
        self.dtypes_dict = dict(self.dtypes_flat)
        self.columns = tuple([c for c, _ in self.dtypes_flat])


class _RECORD_SCHEMA(_SCHEMA):
    # a PAF record with its cg:Z: tag in the 13th column, followed by the
    # feature as a BED6+ row projected onto the query and then onto the target.
    # lengths, PAF columns 10-12, scores and feature classes are not needed.
    column_indices = [0, 2, 3, 4, 5, 7, 8, 12,
                      13, 14, 15, 16, 18,
                      20, 21, 22, 23, 25]
    dtypes_flat = [('query_name', str),
                   ('query_start', int),
                   ('query_end', int),
                   ('query_strand', str),
                   ('target_name', str),
                   ('target_start', int),
                   ('target_end', int),
                   ('cigar', str),
                   ('feature_query_seq', str),
                   ('feature_query_start', int),
                   ('feature_query_end', int),
                   ('feature_query_name', str),
                   ('feature_query_strand', str),
                   ('feature_target_seq', str),
                   ('feature_target_start', int),
                   ('feature_target_end', int),
                   ('feature_target_name', str),
                   ('feature_target_strand', str)]
RECORD_SCHEMA = _RECORD_SCHEMA()


class _FEATURE_COUNT_SCHEMA(_SCHEMA):
    dtypes_flat = [(COLUMN_FEATURE_NAME, COLUMN_FEATURE_NAME_DTYPE),
                   (COLUMN_QUERY, COLUMN_QUERY_DTYPE),
                   (COLUMN_QUERY_FEATURE_START, COLUMN_POSITION_DTYPE),
                   (COLUMN_QUERY_FEATURE_STOP, COLUMN_POSITION_DTYPE),
                   (COLUMN_QUERY_STRAND, COLUMN_QUERY_STRAND_DTYPE),
                   (COLUMN_TARGET, COLUMN_TARGET_DTYPE),
                   (COLUMN_TARGET_FEATURE_START, COLUMN_POSITION_DTYPE),
                   (COLUMN_TARGET_FEATURE_STOP, COLUMN_POSITION_DTYPE),
                   (COLUMN_ALIGNED, COLUMN_COUNT_DTYPE),
                   (COLUMN_NOT_ALIGNED_QUERY, COLUMN_COUNT_DTYPE),
                   (COLUMN_NOT_ALIGNED_TARGET, COLUMN_COUNT_DTYPE),
                   (COLUMN_INDELS_QUERY, COLUMN_COUNT_DTYPE),
                   (COLUMN_INDELS_TARGET, COLUMN_COUNT_DTYPE),
                   (COLUMN_IGNORED_QUERY, COLUMN_COUNT_DTYPE),
                   (COLUMN_IGNORED_TARGET, COLUMN_COUNT_DTYPE)]
FEATURE_COUNT_SCHEMA = _FEATURE_COUNT_SCHEMA()

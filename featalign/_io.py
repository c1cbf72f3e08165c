import gzip
import io
import lzma
import multiprocessing as mp
import re
import sys
from contextlib import contextmanager
from functools import partial

import polars as pl

from ._cigar import cigar_to_lens
from ._constants import (
    CIGAR_TAG,
    FEATURE_COUNT_SCHEMA,
    RECORD_SCHEMA,
    STRAND_FORWARD,
)
from ._count import (
    AlignmentRecord,
    FeatureInterval,
    count_aligned_bases,
)
from ._utils import logger

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


@contextmanager
def _reader(data):
    """Indirection to support reading from stdin or a file."""
    if data == "-" or data is None:
        yield sys.stdin.buffer
    elif isinstance(data, io.BytesIO):
        yield data
    else:
        if data.endswith(".xz"):
            with lzma.open(data, mode="rb") as fp:
                yield fp
        elif data.endswith(".gz"):
            with gzip.open(data, mode="rb") as fp:
                yield fp
        else:
            with open(data, "rb") as fp:
                yield fp


@contextmanager
def _writer(output):
    """Indirection to support writing to stdout or a file."""
    if output == "-" or output is None:
        yield sys.stdout
    elif isinstance(output, io.StringIO):
        yield output
    else:
        with open(output, "w") as fp:
            yield fp


def _flatten_buf(buf):
    """Map [data_1, ... data_N] -> IOobject(all_data) via simple join."""
    if isinstance(buf[0], str):
        return io.StringIO("".join(buf))
    else:
        return io.BytesIO(b"".join(buf))


def parse_records_to_df(data):
    """Parse alignment and feature rows, keeping only the columns we need.

    Every column is read as a string; integer conversion happens per record
    so that a broken value can be reported with its record number.
    """
    try:
        return pl.read_csv(
            data,
            separator="\t",
            has_header=False,
            columns=RECORD_SCHEMA.column_indices,
            new_columns=list(RECORD_SCHEMA.columns),
            infer_schema_length=0,
            quote_char=None,
            truncate_ragged_lines=True,
        )
    except pl.exceptions.PolarsError as e:
        raise ValueError(
            f"Input does not look like alignments joined with features "
            f"({len(RECORD_SCHEMA.column_indices)} required columns, up to "
            f"column {RECORD_SCHEMA.column_indices[-1] + 1}): {e}"
        ) from e


def _field(row, name, recno):
    value = row[name]
    if value is None and name == "cigar":
        # an empty CIGAR is an empty alignment path, not a missing field
        return ""
    if value is None:
        raise ValueError(f"Record {recno}: missing '{name}'")

    if RECORD_SCHEMA.dtypes_dict[name] is int:
        if _INTEGER_RE.fullmatch(value) is None:
            raise ValueError(
                f"Record {recno}: invalid '{name}', not an integer: {value!r}"
            )
        return int(value)
    return value


def record_from_row(row, recno):
    """Map a parsed row -> (AlignmentRecord, query FeatureInterval,
    target FeatureInterval).

    Raises
    ------
    ValueError
        If a required field is absent or an integer field does not parse.

    """
    values = {name: _field(row, name, recno) for name in RECORD_SCHEMA.columns}

    # the CIGAR is carried as a PAF tag
    cigar = values["cigar"].split(CIGAR_TAG)[-1]

    record = AlignmentRecord(values["query_name"],
                             values["query_start"],
                             values["query_end"],
                             values["query_strand"],
                             values["target_name"],
                             values["target_start"],
                             values["target_end"],
                             cigar)
    feature_query = FeatureInterval(values["feature_query_seq"],
                                    values["feature_query_start"],
                                    values["feature_query_end"],
                                    values["feature_query_name"],
                                    values["feature_query_strand"])
    feature_target = FeatureInterval(values["feature_target_seq"],
                                     values["feature_target_start"],
                                     values["feature_target_end"],
                                     values["feature_target_name"],
                                     values["feature_target_strand"])
    return record, feature_query, feature_target


def _describe(record, feature_query, feature_target):
    return "\t".join(map(str, (feature_query.name,
                               record.query_name,
                               feature_query.start,
                               feature_query.end,
                               record.query_strand,
                               record.target_name,
                               feature_target.start,
                               feature_target.end)))


def check_record(record, feature_query, feature_target):
    """Test whether a record can be classified, warn if not.

    Returns
    -------
    bool
        False if names disagree between the alignment and the two feature
        projections, or if the feature changes strand while query and target
        are in the same orientation.

    """
    if (record.query_name != feature_query.seq_name
            or record.target_name != feature_target.seq_name
            or feature_query.name != feature_target.name):
        logger.warning(
            "query, target, and/or feature name do not match! Skip this "
            "line: %s", _describe(record, feature_query, feature_target)
        )
        return False

    if (feature_query.strand != feature_target.strand
            and record.query_strand == STRAND_FORWARD):
        # a feature on different strands is only consistent if the query
        # aligns reversed
        logger.warning(
            "the feature is on different strands in query and target, but "
            "query and target are in the same orientation! Skip this line: "
            "%s", _describe(record, feature_query, feature_target)
        )
        return False

    return True


def check_spans(record):
    """Warn if the CIGAR does not span the aligned intervals."""
    query_span, target_span = cigar_to_lens(record.cigar)
    expected = (record.query_end - record.query_start,
                record.target_end - record.target_start)
    if (query_span, target_span) != expected:
        logger.warning(
            "CIGAR spans %d query and %d target bases but the alignment "
            "covers %d and %d: %s\t%s",
            query_span, target_span, expected[0], expected[1],
            record.query_name, record.target_name,
        )
        return False
    return True


def _classify(item, max_indel_size):
    record, feature_query, feature_target = item
    return count_aligned_bases(record, feature_query, feature_target,
                               max_indel_size=max_indel_size)


@contextmanager
def _mapper(threads):
    """Yield an order preserving map, backed by a pool if threads > 1."""
    if threads > 1:
        with mp.Pool(processes=threads) as pool:
            yield partial(pool.imap, chunksize=1024)
    else:
        yield map


def classify_records(items, max_indel_size=None, threads=1):
    """Classify (record, feature_query, feature_target) items.

    Parameters
    ----------
    items : iterable of tuple
        The records and their feature projections.
    max_indel_size : int, optional
        See count_aligned_bases.
    threads : int, optional
        The number of worker processes.

    Returns
    -------
    list of OverlapResult
        The results, in the order of the items.

    """
    with _mapper(threads) as map_f:
        return _classify_all(map_f, items, max_indel_size)


def _classify_all(map_f, items, max_indel_size):
    return list(map_f(partial(_classify, max_indel_size=max_indel_size),
                      items))


def _result_row(item, result):
    record, feature_query, feature_target = item
    return (feature_query.name,
            record.query_name,
            feature_query.start,
            feature_query.end,
            record.query_strand,
            record.target_name,
            feature_target.start,
            feature_target.end) + tuple(result)


def results_to_df(items, results):
    """Express classified records as a DataFrame."""
    return pl.DataFrame(
        [_result_row(item, result) for item, result in zip(items, results)],
        schema=FEATURE_COUNT_SCHEMA.dtypes_flat,
        orient="row",
    )


def count_from_stream(data, output, max_indel_size=None, threads=1,
                      bufsize=100_000_000, spans=False):
    """Count aligned feature bases of tab-delimited alignment records.

    Parameters
    ----------
    data : file path or buffer, or None / "-" for stdin
        Alignments joined with their features, plain, gzip or xz compressed.
    output : file path or buffer, or None / "-" for stdout
        Where to write the table.
    max_indel_size : int, optional
        See count_aligned_bases.
    threads : int, optional
        The number of worker processes to classify with.
    bufsize : int, optional
        The amount of input, in bytes, to parse at once.
    spans : bool, optional
        Warn about records whose CIGAR does not span the aligned intervals.

    Returns
    -------
    int
        Number of rows written.
    int
        Number of records skipped.

    Notes
    -----
    The header is always written. Rows are written in input order.

    """
    written, skipped, recno = 0, 0, 0
    header = True

    with _reader(data) as fp, _writer(output) as out, \
            _mapper(threads) as map_f:
        buf = fp.readlines(bufsize)
        while len(buf) > 0:
            items = []
            for row in parse_records_to_df(_flatten_buf(buf)).iter_rows(
                    named=True):
                recno += 1
                item = record_from_row(row, recno)
                if not check_record(*item):
                    skipped += 1
                    continue
                if spans:
                    check_spans(item[0])
                items.append(item)

            results = _classify_all(map_f, items, max_indel_size)
            out.write(
                results_to_df(items, results).write_csv(
                    separator="\t",
                    include_header=header,
                    quote_style="never",
                )
            )
            header = False
            written += len(items)
            buf = fp.readlines(bufsize)

        if header:
            out.write(
                results_to_df([], []).write_csv(
                    separator="\t",
                    include_header=True,
                    quote_style="never",
                )
            )

    return written, skipped

"""featalign CLI."""

import click

from . import __version__
from ._io import count_from_stream
from ._utils import logger


@click.group()
@click.version_option(__version__)
def cli():
    """featalign: aligned bases of features between query and target."""


@cli.command()
@click.option(
    "--input",
    "data",
    type=click.Path(exists=True, allow_dash=True),
    required=False,
    help="Alignments joined with features, can be gzip or xz compressed",
)
@click.option("--output", type=click.Path(exists=False), required=False)
@click.option(
    "--max-indel-size",
    type=click.IntRange(min=0),
    required=False,
    default=None,
    help="Maximum size of indels to consider in feature intervals",
)
@click.option("--threads", type=click.IntRange(min=1), default=1, required=False)
@click.option(
    "--check-spans",
    is_flag=True,
    default=False,
    help="Warn about CIGARs not spanning the aligned intervals",
)
def count(data, output, max_indel_size, threads, check_spans):
    """Count aligned bases for features in alignment data.

    This command can work with pipes, e.g.:

    bedtools intersect ... | featalign count --max-indel-size 5 > counts.tsv
    """
    try:
        written, skipped = count_from_stream(
            data,
            output,
            max_indel_size=max_indel_size,
            threads=threads,
            spans=check_spans,
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    logger.info(f"Wrote {written} feature(s), skipped {skipped} record(s)")


if __name__ == "__main__":
    cli()

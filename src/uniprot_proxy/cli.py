"""Command-line interface for the UniProt proxy."""

import json
import sys
from pathlib import Path

import click
from Bio import SeqIO

from .config import Config, create_example_config, get_default_config_path
from .error_handler import get_error_handler
from .exceptions import UniProtProxyError
from .fetcher import CachedFetcher
from .logging_config import get_logger, setup_logging
from .sequence import ProxySequence

logger = get_logger('cli')


def _load_sequence(ctx: click.Context, accession: str) -> ProxySequence:
    """Build a ProxySequence, turning package errors into a clean CLI exit."""
    try:
        return ProxySequence(accession, fetcher=ctx.obj['fetcher'])
    except UniProtProxyError as e:
        click.echo(f"Error: {accession}: {e}", err=True)
        ctx.exit(1)


@click.group()
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False), help='Configuration file path')
@click.option('--cache-dir', type=click.Path(file_okay=False), help='Directory for cached UniProt XML records')
@click.option('--no-cache', is_flag=True, help='Disable the record cache')
@click.option('--base-url', help='UniProt base URL (default https://www.uniprot.org)')
@click.option('--timeout-ms', type=int, help='Connect/read timeout in milliseconds')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress all output except errors')
@click.pass_context
def cli(ctx, config_file, cache_dir, no_cache, base_url, timeout_ms, verbose, quiet):
    """UniProt proxy sequence tool.

    Fetch UniProt entries by accession, validate their sequences and print
    sequences, metadata or cross-references.

    Examples:
        uniprot-proxy --cache-dir .uniprot_cache fetch P69905 P68871
        uniprot-proxy info P69905
    """
    if quiet and verbose:
        raise click.UsageError("Cannot use both --quiet and --verbose")

    setup_logging(log_level='DEBUG' if verbose else 'INFO', quiet=quiet)

    config_path = Path(config_file) if config_file else get_default_config_path()
    cfg = Config.from_file(config_path)
    cfg.merge_env_vars()
    cfg.merge_cli_args(
        cache_dir=cache_dir,
        no_cache=no_cache,
        base_url=base_url,
        timeout_ms=timeout_ms
    )

    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg
    ctx.obj['fetcher'] = CachedFetcher(cfg)
    ctx.call_on_close(ctx.obj['fetcher'].close)


@cli.command()
@click.argument('accessions', nargs=-1, required=True)
@click.option('--output', '-o', type=click.Path(dir_okay=False, writable=True), help='FASTA output file (default stdout)')
@click.pass_context
def fetch(ctx, accessions, output):
    """Fetch sequences and write them as FASTA."""
    records = []
    failed = []
    for accession in accessions:
        try:
            sequence = ProxySequence(accession, fetcher=ctx.obj['fetcher'])
        except UniProtProxyError as e:
            click.echo(f"Error: {accession}: {e}", err=True)
            failed.append(accession)
            continue
        records.append(sequence.to_seq_record())

    if output:
        with open(output, 'w') as handle:
            SeqIO.write(records, handle, 'fasta')
        logger.info(f"Wrote {len(records)} sequences to {output}")
    else:
        SeqIO.write(records, sys.stdout, 'fasta')

    if failed:
        summary = get_error_handler().get_error_summary()
        logger.debug(f"Error summary: {summary}")
        click.echo(f"{len(failed)} of {len(accessions)} accessions failed: {', '.join(failed)}", err=True)
        ctx.exit(1)


@cli.command()
@click.argument('accession')
@click.pass_context
def info(ctx, accession):
    """Print the metadata of an entry as JSON."""
    sequence = _load_sequence(ctx, accession)

    references = sequence.database_references()
    data = {
        'accession': accession,
        'entry_name': sequence.accession.identifier,
        'accessions': [a.identifier for a in sequence.accessions()],
        'protein_name': sequence.protein_name(),
        'protein_aliases': sequence.protein_aliases(),
        'gene_name': sequence.gene_name(),
        'gene_aliases': sequence.gene_aliases(),
        'organism': sequence.organism_name(),
        'keywords': sequence.keywords(),
        'length': len(sequence),
        'database_references': {ref_type: len(refs) for ref_type, refs in references.items()},
    }
    click.echo(json.dumps(data, indent=2))


@cli.command()
@click.argument('accession')
@click.option('--type', 'ref_type', multiple=True, help='Only these reference types (e.g. PDB, Pfam)')
@click.pass_context
def xrefs(ctx, accession, ref_type):
    """Print cross-references of an entry as TSV."""
    sequence = _load_sequence(ctx, accession)

    table = sequence.database_references_table()
    if ref_type:
        table = table[table['type'].isin(ref_type)]
    click.echo(table.to_csv(sep='\t', index=False), nl=False)


@cli.command('init-config')
@click.argument('path', type=click.Path(dir_okay=False), required=False)
def init_config(path):
    """Write an example configuration file."""
    config_path = create_example_config(Path(path) if path else None)
    click.echo(f"Generated example configuration file: {config_path}")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()

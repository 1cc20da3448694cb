"""Command-line interface for Parallel Chunks."""

import logging
from pathlib import Path
from typing import Callable, List
import click
from . import __version__
from .encryption import DEFAULT_DELAY_DIVISOR
from .error_handler import ErrorHandler
from .file_cryptor import FileCryptor
from .models import ChunkLayout, DEFAULT_CHUNK_SIZE
from .types import OperationResult, ProcessingError


DEFAULT_FILE = "src/main/resources/stories.csv"

path_option = click.option(
    '--path', '-p', default=DEFAULT_FILE, show_default=True,
    type=click.Path(path_type=Path),
    help='Source file (encrypted outputs are derived from it)'
)
output_option = click.option(
    '--output', '-o', default=None, type=click.Path(dir_okay=False, path_type=Path),
    help='Write the decrypted content to this file'
)


def setup_logging(verbose: bool) -> None:
    """Configure the root logger for command-line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _run(ctx: click.Context, operation: Callable[[], List[OperationResult]]) -> None:
    """Run a cryptor operation, reporting results or a recovery suggestion."""
    try:
        results = operation()
    except ProcessingError as e:
        response = ErrorHandler().handle_processing_error(e)
        click.echo(f"❌ Error: {e}", err=True)
        click.echo(f"   • {response.suggested_action}", err=True)
        ctx.exit(1)

    for index, result in enumerate(results):
        if index:
            click.echo()
        chunks = f", {result.chunk_count} chunks" if result.chunk_count else ""
        click.echo(f"✅ {result.operation}: {result.input_size} -> {result.output_size} bytes"
                   f"{chunks} in {result.duration * 1000:.0f} ms")

    if ctx.obj["report"]:
        click.echo()
        click.echo(ctx.obj["cryptor"].profiler.export_metrics("summary"))


@click.group()
@click.version_option(version=__version__)
@click.option('--chunk-size', default=DEFAULT_CHUNK_SIZE, show_default=True,
              type=click.IntRange(min=1), envvar='PARALLEL_CHUNKS_CHUNK_SIZE',
              help='Chunk size in bytes for the chunked strategy')
@click.option('--workers', default=None, type=click.IntRange(min=1),
              envvar='PARALLEL_CHUNKS_WORKERS',
              help='Worker threads for chunk tasks (default: number of CPUs)')
@click.option('--delay-divisor', default=DEFAULT_DELAY_DIVISOR, show_default=True,
              type=click.IntRange(min=0), envvar='PARALLEL_CHUNKS_DELAY_DIVISOR',
              help='Simulated cipher speed in bytes per millisecond (0 = no delay)')
@click.option('--report', is_flag=True, help='Print a performance summary after the command')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx: click.Context, chunk_size: int, workers: int, delay_divisor: int,
         report: bool, verbose: bool):
    """Parallel Chunks - compare whole-file and chunked parallel encryption."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["report"] = report
    ctx.obj["cryptor"] = FileCryptor(
        layout=ChunkLayout(chunk_size_bytes=chunk_size),
        max_workers=workers,
        delay_divisor=delay_divisor
    )


@main.command()
@path_option
@click.pass_context
def encrypt(ctx: click.Context, path: Path):
    """Encrypt a file whole, then in parallel chunks."""
    _run(ctx, lambda: ctx.obj["cryptor"].encrypt(path))


@main.command('encrypt-whole')
@path_option
@click.pass_context
def encrypt_whole(ctx: click.Context, path: Path):
    """Encrypt a file in one piece into <path>.encrypted."""
    _run(ctx, lambda: [ctx.obj["cryptor"].encrypt_whole(path)])


@main.command('encrypt-chunked')
@path_option
@click.pass_context
def encrypt_chunked(ctx: click.Context, path: Path):
    """Encrypt a file in parallel chunks into <path>.encrypted.chunked/."""
    _run(ctx, lambda: [ctx.obj["cryptor"].encrypt_chunked(path)])


@main.command()
@path_option
@click.pass_context
def decrypt(ctx: click.Context, path: Path):
    """Decrypt the whole-file ciphertext, then the chunk set."""
    _run(ctx, lambda: ctx.obj["cryptor"].decrypt(path))


@main.command('decrypt-whole')
@path_option
@output_option
@click.pass_context
def decrypt_whole(ctx: click.Context, path: Path, output: Path):
    """Decrypt <path>.encrypted in one piece."""
    _run(ctx, lambda: [ctx.obj["cryptor"].decrypt_whole(path, output)])


@main.command('decrypt-chunked')
@path_option
@output_option
@click.pass_context
def decrypt_chunked(ctx: click.Context, path: Path, output: Path):
    """Decrypt the chunks of <path>.encrypted.chunked/ in parallel."""
    _run(ctx, lambda: [ctx.obj["cryptor"].decrypt_chunked(path, output)])


if __name__ == '__main__':
    main()

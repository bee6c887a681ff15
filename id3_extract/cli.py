"""
Command-line interface for id3-extract.

This module implements the CLI using Click; rich-click is used for the
help output colors.

Commands:
    id3x --file <song.mp3>                   Print the tag of one file as JSON
    id3x -f <a.mp3> -f <b.mp3>               Print {path: tag} for several files
    id3x -f <song.mp3> --art-out <prefix>    Also save the artwork

Options:
    --config <id3x.yaml>                     Explicit configuration file
    --log-dir <dir>                          Write log files to <dir>
    --verbose                                Debug output on the console

Output:
    JSON on stdout. Fields: album, artist, title, year, duration, artwork
    (artwork as a base64 data URI). A file without a readable tag maps to
    null. Diagnostics go to stderr.

Exit Codes:
    0    Success
    1    Configuration error or unexpected error
    2    A file could not be read
    130  Interrupted
"""

import json
from pathlib import Path
from typing import Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "cli": [
        {
            "name": "Input",
            "options": ["--file"],
        },
        {
            "name": "Output",
            "options": ["--art-out"],
        },
        {
            "name": "Advanced Options",
            "options": ["--config", "--log-dir", "--verbose"],
        },
        {
            "name": "Info",
            "options": ["--version", "--help"],
        },
    ],
}

from id3_extract import __version__
from id3_extract.core import (
    Config,
    ConfigError,
    Id3ExtractError,
    TagReadError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from id3_extract.core.file_manager import FileArtworkSink, read_tag_region
from id3_extract.core.progress import ScanProgressBar
from id3_extract.id3 import has_tag_marker, read_tag

logger = get_logger(__name__)


@click.command()
@click.option(
    "--file", "-f", "files",
    type=click.Path(path_type=Path),
    multiple=True,
    metavar="<song.mp3>",
    help="MP3 file to read (repeatable)"
)
@click.option(
    "--art-out", "-a",
    type=click.Path(path_type=Path),
    default=None,
    metavar="<prefix>",
    help="Save artwork to <prefix>.<ext>"
)
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(path_type=Path),
    default=None,
    metavar="<id3x.yaml>",
    help="Configuration file (default: ./id3x.yaml if present)"
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Write log files to this directory"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug output"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    files: tuple[Path, ...],
    art_out: Optional[Path],
    config_path: Optional[Path],
    log_dir: Optional[Path],
    verbose: bool,
    version: bool
) -> None:
    """
    id3-extract: Read metadata from the ID3v2 tag of MP3 files.

    Prints album, artist, title, year, duration and artwork (as a data URI)
    as JSON.

    \b
    BASIC USAGE:
        id3x --file song.mp3                     # One file
        id3x -f a.mp3 -f b.mp3                   # Several files

    \b
    ARTWORK:
        id3x -f song.mp3 --art-out cover         # Saves cover.jpg / cover.png
        id3x -f a.mp3 -f b.mp3 -a covers/art     # covers/art-a.jpg, covers/art-b.jpg
    """
    if version:
        click.echo(f"id3-extract {__version__}")
        ctx.exit(0)

    if not files:
        click.echo(ctx.get_help())
        ctx.exit(0)

    exit_code = _run_extract(files, art_out, config_path, log_dir, verbose)
    ctx.exit(exit_code)


def _run_extract(
    files: tuple[Path, ...],
    art_out: Path | None,
    config_path: Path | None,
    log_dir: Path | None,
    verbose: bool
) -> int:
    """
    Read the tags of all files and print them.

    Args:
        files: Audio files given on the command line.
        art_out: Artwork prefix from the command line (overrides config).
        config_path: Explicit configuration file.
        log_dir: Log directory from the command line (overrides config).
        verbose: Force DEBUG console output.

    Returns:
        Process exit code.
    """
    try:
        config = load_config(config_path)

        level = "DEBUG" if verbose else config.logging.level
        setup_logging(log_dir or config.logging.directory, level)
        logger.debug(f"id3-extract {__version__} starting")

        art_prefix = art_out.expanduser() if art_out else config.output.art_out
        results, read_failed = _extract_all(files, art_prefix)

        _print_results(results, config)

        logger.debug("id3-extract completed")
        return 2 if read_failed else 0

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        return 1

    except Id3ExtractError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        return 1

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        return 1

    finally:
        shutdown_logging()


def _extract_all(
    files: tuple[Path, ...],
    art_prefix: Path | None
) -> tuple[dict[str, dict[str, str] | None], bool]:
    """
    Read the tag of every file.

    Args:
        files: Audio files to read.
        art_prefix: Artwork output prefix, or None to skip artwork.

    Returns:
        Tuple of ({path: tags or None}, whether any file failed to read).
    """
    many = len(files) > 1
    results: dict[str, dict[str, str] | None] = {}
    read_failed = False

    with ScanProgressBar(total=len(files)) as progress:
        for path in files:
            try:
                tags = _extract_one(path, art_prefix, many)
            except TagReadError as e:
                click.echo(f"Read error: {e.message}", err=True)
                logger.debug(f"Details: {e.details}")
                results[str(path)] = None
                read_failed = True
                progress.update(found=False, failed=True)
                continue

            results[str(path)] = tags
            progress.update(found=tags is not None)

    return results, read_failed


def _extract_one(path: Path, art_prefix: Path | None, many: bool) -> dict[str, str] | None:
    """
    Read the tag of one file.

    Args:
        path: Audio file.
        art_prefix: Artwork output prefix, or None.
        many: Whether several files are processed in this run.

    Returns:
        The decoded tags, or None when the file has no readable tag.

    Raises:
        TagReadError: If the file cannot be read.
    """
    data = read_tag_region(path)
    if not has_tag_marker(data):
        logger.warning(f"No ID3v2 tag: {path}")
        return None

    sink = FileArtworkSink.for_source(art_prefix, path, many) if art_prefix else None
    tags = read_tag(data, artwork_sink=sink)
    if tags is None:
        logger.warning(f"Could not decode tag: {path}")
    else:
        logger.debug(f"{path}: {', '.join(sorted(tags)) or 'no known frames'}")
    return tags


def _print_results(results: dict[str, dict[str, str] | None], config: Config) -> None:
    """
    Print results as JSON on stdout.

    A single file prints its tag mapping directly; several files print
    a mapping from path to tags.
    """
    if len(results) == 1:
        payload = next(iter(results.values()))
    else:
        payload = results

    indent = config.output.indent or None
    click.echo(json.dumps(payload, indent=indent, ensure_ascii=False))


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `id3x` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()

"""Command-line interface for the power-of-two pair search."""

import re
import sys
from pathlib import Path
from typing import Callable, Dict, List

import click
from rich.console import Console

from . import __version__
from .config import ConfigManager, SearchConfig, create_default_config_file
from .engine.errors import ConfigurationError, WorkerError
from .engine.moves import MOVE_RULES
from .reporting import ResultReporter
from .search import PowerPairSearch
from .utils.logging_setup import get_logger, setup_logging

logger = get_logger(__name__)

PROGRAM_NAME = "powerpairs"

USAGE = (
    "Missing arguments.\n"
    "Searching  Algo Usage: {prog} triplet-count combiner-levels min-set-size [max-set-size]\n"
    "Simplified Algo Usage: {prog} min-set-size [max-set-size]"
)

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")
_NEGATIVE_NUMBER = re.compile(r"-\d")


def parse_count(text: str) -> int:
    """
    Parse a positional count the way C ``atoi`` reads it.

    The leading integer is used and anything after it ignored; text without
    one reads as 0. Negative counts are clamped to 0.
    """
    match = _LEADING_INTEGER.match(text)
    value = int(match.group(1)) if match else 0
    if value < 0:
        logger.warning(f"Negative count {text!r} read as 0")
        return 0
    return value


class SearchArguments:
    """Positional arguments resolved into one of the two modes."""

    def __init__(self, values: List[int]):
        self.simplified = len(values) <= 2
        if self.simplified:
            self.triplet_count = 0
            self.combiner_levels = 0
            self.min_set_size = values[0]
            self.max_set_size = values[1] if len(values) == 2 else values[0]
        else:
            self.triplet_count = values[0]
            self.combiner_levels = values[1]
            self.min_set_size = values[2]
            self.max_set_size = values[3] if len(values) >= 4 else values[2]


# Options that map onto SearchConfig fields, with how each value is set
CONFIG_OPTIONS: Dict[str, Callable[[SearchConfig, object], None]] = {
    "workers": lambda config, value: setattr(config, "workers", value),
    "move_rule": lambda config, value: setattr(config, "move_rule", value),
    "power_count": lambda config, value: setattr(config, "power_count", value),
    "no_progress": lambda config, value: setattr(config, "show_progress", not value),
    "verbose": lambda config, value: setattr(config, "log_level", "DEBUG"),
    "log_dir": lambda config, value: setattr(config, "log_dir", str(value)),
}


def apply_options(config: SearchConfig, **options) -> SearchConfig:
    """Apply the command-line options that were given onto ``config``."""
    for name, value in options.items():
        if value is None or value is False:
            continue
        CONFIG_OPTIONS[name](config, value)
    return config


@click.command(name=PROGRAM_NAME, context_settings={"ignore_unknown_options": True})
@click.argument("values", nargs=-1)
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to configuration file")
@click.option("--workers", "-w", type=int, help="Number of worker threads")
@click.option("--move-rule", type=click.Choice(sorted(MOVE_RULES)),
              help="Local search move rule")
@click.option("--power-count", type=int, help="Number of powers of two to search with")
@click.option("--no-progress", is_flag=True, help="Do not show the progress bar")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path),
              help="Also write JSON logs to this directory")
@click.option("--show-config", is_flag=True, help="Print the effective configuration")
@click.option("--write-config", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the default configuration to a file and exit")
@click.version_option(__version__, prog_name=PROGRAM_NAME)
def main(values, config_path, workers, move_rule, power_count, no_progress,
         verbose, log_dir, show_config, write_config):
    """
    Search for sets of integers with many pairwise sums equal to a power of two.

    \b
    Simplified mode:  powerpairs MIN_SET_SIZE [MAX_SET_SIZE]
    Search mode:      powerpairs TRIPLET_COUNT COMBINER_LEVELS MIN_SET_SIZE [MAX_SET_SIZE]
    """
    for value in values:
        if value.startswith("-") and not _NEGATIVE_NUMBER.match(value):
            raise click.NoSuchOption(value)

    if write_config:
        path = create_default_config_file(write_config)
        click.echo(f"Wrote default configuration to {path}")
        sys.exit(0)

    if not values:
        click.echo(USAGE.format(prog=PROGRAM_NAME), err=True)
        sys.exit(1)

    try:
        config = ConfigManager(config_path).load()
        apply_options(config, workers=workers, move_rule=move_rule, power_count=power_count,
                      no_progress=no_progress, verbose=verbose, log_dir=log_dir)
        config.validate()
    except ConfigurationError as e:
        click.echo(f"{PROGRAM_NAME} error: {e.message}", err=True)
        for error in e.errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    setup_logging(PROGRAM_NAME, level=config.log_level,
                  log_dir=Path(config.log_dir) if config.log_dir else None)

    if show_config:
        ConfigManager(config_path).display(Console(file=sys.stderr), config)

    if len(values) > 4:
        logger.warning(f"Ignoring extra arguments: {' '.join(values[4:])}")
    arguments = SearchArguments([parse_count(value) for value in values[:4]])

    search = PowerPairSearch(config)
    reporter = ResultReporter()
    try:
        if arguments.simplified:
            results = search.run_simplified(arguments.min_set_size, arguments.max_set_size)
        else:
            results = search.run_search(arguments.triplet_count, arguments.combiner_levels,
                                        arguments.min_set_size, arguments.max_set_size)
        for result in results:
            reporter.report(result)
    except WorkerError as e:
        logger.error(f"Search failed: {e.message}")
        click.echo(f"{PROGRAM_NAME} error: {e.message}", err=True)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()

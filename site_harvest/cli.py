# === FILE: site_harvest/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of the SiteHarvest crawler.

Commands:
  crawl     Resolve the sitemaps, crawl the pages and store the records
  config    Show the effective configuration

Common options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string

crawl options:
  --sitemap URL       Seed sitemap, repeatable (overrides the config)
  --limit INT         Request budget (overrides max_requests_per_crawl)
  --concurrency INT   Number of parallel workers
  --storage-dir DIR   Where the dataset and key-value store are written
  --json PATH         Also save the run statistics to a JSON file
  --pretty            Indent the JSON output

Example:
  site-harvest -c configs/default.yaml crawl --limit 100 --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_harvest import __version__
from site_harvest.config import load_config
from site_harvest.engine import start_crawl
from site_harvest.logger import init_logging
from site_harvest.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteHarvest, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(name)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteHarvest command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--sitemap', '-s', 'sitemaps',
    multiple=True,
    help='Seed sitemap URL (repeatable, replaces the configured list)'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Request budget (overrides max_requests_per_crawl)'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Number of parallel workers'
)
@click.option(
    '--storage-dir', 'storage_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory for the dataset and key-value store'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the run statistics to a JSON file'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent the JSON output (2 spaces)'
)
@click.pass_context
def crawl(ctx, sitemaps, limit, concurrency, storage_dir, json_output, pretty):
    """Crawl every page listed by the configured sitemaps."""
    cfg = ctx.obj['config']
    overrides = {}
    if sitemaps:
        overrides['sitemaps'] = list(sitemaps)
    if limit is not None:
        overrides['max_requests_per_crawl'] = limit
    if concurrency is not None:
        overrides['concurrency'] = concurrency
    if storage_dir is not None:
        overrides['storage_dir'] = storage_dir
    if overrides:
        try:
            cfg = cfg.model_validate({**cfg.model_dump(mode="json"), **overrides})
        except ValidationError as e:
            print_error(f'Invalid option: {e}')

    click.echo(f'Starting crawl of {len(cfg.sitemap_urls)} sitemap(s)', err=True)
    try:
        stats = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    data = stats.as_dict()
    if json_output:
        try:
            saved = render_json(data, json_output)
            click.echo(f'JSON report: {saved}', err=True)
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')

    indent = 2 if pretty else None
    click.echo(json.dumps(data, ensure_ascii=False, indent=indent))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


# expose these names at module level for test monkey-patching
cli.start_crawl = start_crawl
cli.render_json = render_json

if __name__ == "__main__":
    cli()

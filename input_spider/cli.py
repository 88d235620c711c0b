#!/usr/bin/env python3
"""
Command-line entry point for the InputSpider crawler.

Crawls every page reachable from the seed URLs without leaving their
scheme+host and prints the ``<input>`` elements found on each page.

Options:
  --urls, -u TEXT         Comma-separated seed URLs
  --url-file, -f PATH     File of newline-separated seed URLs
  --config, -c PATH       Optional YAML/JSON config (seeds, concurrency, ...)
  --concurrency, -n INT   Concurrency level 0-5 (1, 5, 10, 20, 50, 100 workers)
  --timeout SEC           Per-request timeout
  --user-agent TEXT       User-Agent header
  --verify-tls            Validate TLS certificates (off by default)
  --scan-timeout SEC      Timeout for the whole crawl
  --log-file PATH         Also write logs to this file
  -v / -vv                Log found URLs / per-page processing

Examples:
  input-spider -u http://www.example.com/
  input-spider -u http://127.0.0.1:8080/,http://www.example.com/
  input-spider -f urls.txt -n 4
  input-spider -vv -u http://www.example.com/example/page/1?id=2#heading
"""
import asyncio
import sys
from pathlib import Path

import click

from input_spider import __version__
from input_spider.config import build_config, load_seed_file, read_config_file, split_seeds
from input_spider.errors import ConfigurationError
from input_spider.logger import configure, verbosity_to_level
from input_spider.scanner import start_scan

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def print_usage_error(ctx: click.Context, message: str):
    click.secho(f'[ERROR] {message}', fg='red', err=True)
    click.echo(ctx.get_help(), err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', message='InputSpider, version %(version)s')
@click.option(
    '--urls', '-u', 'urls',
    default=None,
    help='URL or comma-separated list of URLs to search. Their scheme and host form the whitelist.'
)
@click.option(
    '--url-file', '-f', 'url_file',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='File of newline-separated URLs to search.'
)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='YAML/JSON config file; command-line options override it.'
)
@click.option(
    '--concurrency', '-n', 'concurrency',
    type=int,
    default=None,
    help='Concurrency level 0-5 (1, 5, 10, 20, 50, 100 workers)  [default: 3]'
)
@click.option(
    '--timeout', 'timeout',
    type=float,
    default=None,
    help='Per-request timeout in seconds  [default: 10]'
)
@click.option('--user-agent', 'user_agent', default=None, help='User-Agent header')
@click.option('--verify-tls', 'verify_tls', is_flag=True, help='Validate TLS certificates')
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Timeout for the whole crawl (seconds)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also write logs to this file'
)
@click.option('-v', '--verbose', 'verbose', count=True, help='-v logs found URLs, -vv also logs page processing')
@click.pass_context
def cli(ctx, urls, url_file, config_path, concurrency, timeout, user_agent, verify_tls, scan_timeout, log_file, verbose):
    """Spider the given scope and print the input fields found on each page."""
    configure(
        level=verbosity_to_level(verbose),
        log_file=str(log_file) if log_file else None,
    )

    try:
        data = read_config_file(config_path) if config_path else {}
        seeds = []
        if urls:
            seeds.extend(split_seeds(urls))
        if url_file:
            seeds.extend(load_seed_file(url_file))
        cfg = build_config(
            data,
            seeds=seeds or None,
            concurrency=concurrency,
            timeout=timeout,
            user_agent=user_agent,
            verify_tls=True if verify_tls else None,
        )
    except ConfigurationError as e:
        print_usage_error(ctx, str(e))

    try:
        if scan_timeout:
            asyncio.run(asyncio.wait_for(start_scan(cfg), timeout=scan_timeout))
        else:
            asyncio.run(start_scan(cfg))
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {scan_timeout} seconds')
    except Exception as e:
        print_error(f'Crawl failed: {e}')


if __name__ == "__main__":
    cli()

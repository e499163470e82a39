#!/usr/bin/env python3
"""nodeprobe - Command line interface for location, purity and latency checks"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..main import setup_logging
from ..proxy_core.config import ConfigManager, ProbeConfig, create_cli_overrides
from ..proxy_core.constants import CLI_DEFAULT_THREADS
from ..proxy_core.exceptions import ConfigurationError
from ..proxy_core.geo.geo_manager import LocationManager
from ..proxy_core.models import LocationRecord, PurityRecord
from ..proxy_core.network import NetworkClient
from ..proxy_core.utils import parse_server_address
from ..proxy_engine import latency as latency_checks
from ..proxy_engine.purity_manager import PurityManager

logger = logging.getLogger(__name__)

# Rich styles for purity indicators
INDICATOR_STYLES = {
    'green': 'bold green',
    'yellow': 'yellow',
    'orange': 'dark_orange',
    'red': 'red',
}


@dataclass
class CLIContext:
    """Objects shared by every subcommand of one invocation"""
    config: ProbeConfig
    network: NetworkClient
    console: Console
    locations: LocationManager
    purity: PurityManager


# ===============================================================================
# ARGUMENT HELPERS
# ===============================================================================

def _parse_endpoints(ctx, param, values) -> List[Tuple[str, int]]:
    """Click callback turning HOST:PORT arguments into tuples"""
    endpoints = []
    for value in values:
        parsed = parse_server_address(value)
        if parsed is None:
            raise click.BadParameter(f"expected HOST:PORT, got '{value}'", ctx=ctx, param=param)
        endpoints.append(parsed)
    return endpoints


def _purity_cell(record: PurityRecord) -> str:
    if record.score == 0:
        return "-"
    style = INDICATOR_STYLES.get(record.indicator(), '')
    return f"[{style}]{record.display_string()}[/{style}]"


def _location_cell(record: Optional[LocationRecord]) -> str:
    return record.location_string() if record else "Unknown"


def _echo_json(data):
    click.echo(json.dumps(data, indent=2))


# ===============================================================================
# COMMAND GROUP
# ===============================================================================

@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.version_option(version=__version__, prog_name="nodeprobe")
@click.option('-c', '--config', 'config_path', help='Configuration file (YAML or JSON)')
@click.option('-V', '--verbose', is_flag=True, help='Verbose output (DEBUG level)')
@click.option('-q', '--quiet', is_flag=True, help='Quiet mode (WARNING level)')
@click.option('-N', '--silent', is_flag=True, help='Silent mode (ERROR level)')
@click.option('-T', '--timeout', type=float, help='Override provider and port-reachability timeouts (seconds)')
@click.pass_context
def main_cli(ctx, config_path, verbose, quiet, silent, timeout):
    """nodeprobe - Proxy server location and network purity checks"""
    overrides = create_cli_overrides(verbose=verbose, quiet=quiet, silent=silent, timeout=timeout)
    try:
        manager = ConfigManager(config_path, cli_overrides=overrides)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    errors = manager.validate()
    if errors:
        raise click.ClickException("Invalid configuration: " + "; ".join(errors))

    config = manager.config
    setup_logging(config.log_level, config.log_file)
    logger.debug(f"Loaded configuration from {manager.config_path}")

    network = NetworkClient(user_agent=config.user_agent)
    ctx.call_on_close(network.close)
    ctx.obj = CLIContext(
        config=config,
        network=network,
        console=Console(),
        locations=LocationManager(config, network=network),
        purity=PurityManager(config, network=network)
    )


@main_cli.command('location')
@click.argument('addresses', nargs=-1, required=True)
@click.option('--json', 'as_json', is_flag=True, help='Print JSON instead of a table')
@click.pass_obj
def location_command(obj: CLIContext, addresses, as_json):
    """Look up the geographic location of server addresses"""
    results = [(address, obj.locations.get_location(address)) for address in addresses]

    if as_json:
        _echo_json([
            record.to_dict() if record else {'address': address, 'location': None}
            for address, record in results
        ])
        return

    table = Table(title="Server Locations")
    table.add_column("Address", style="bold cyan")
    table.add_column("Location")
    table.add_column("Region")
    table.add_column("Source", style="dim")
    for address, record in results:
        table.add_row(
            address,
            _location_cell(record),
            (record.region if record else None) or "-",
            (record.source if record else None) or "-"
        )
    obj.console.print(table)


@main_cli.command('purity')
@click.argument('endpoints', nargs=-1, required=True, callback=_parse_endpoints)
@click.option('--json', 'as_json', is_flag=True, help='Print JSON instead of a table')
@click.pass_obj
def purity_command(obj: CLIContext, endpoints, as_json):
    """Score the network purity of HOST:PORT endpoints"""
    records = [obj.purity.get_purity(host, port) for host, port in endpoints]

    if as_json:
        _echo_json([record.to_dict() for record in records])
        return

    table = Table(title="Server Purity")
    table.add_column("Endpoint", style="bold cyan")
    table.add_column("Score", justify="right")
    table.add_column("Level")
    table.add_column("Failed tests", style="dim")
    for record in records:
        failed = [name for name, passed in record.test_results.items() if not passed]
        if record.fallback:
            failed_text = "scoring error"
        else:
            failed_text = ", ".join(failed) or "-"
        table.add_row(
            record.cache_key,
            _purity_cell(record),
            record.purity_level().value,
            failed_text
        )
    obj.console.print(table)


@main_cli.command('inspect')
@click.argument('endpoints', nargs=-1, required=True, callback=_parse_endpoints)
@click.option('-t', '--threads', type=int, default=CLI_DEFAULT_THREADS, show_default=True,
              help='Number of endpoints inspected concurrently')
@click.option('--json', 'as_json', is_flag=True, help='Print JSON instead of a table')
@click.pass_obj
def inspect_command(obj: CLIContext, endpoints, threads, as_json):
    """Location and purity for HOST:PORT endpoints"""

    def inspect_one(endpoint):
        host, port = endpoint
        return obj.locations.get_location(host), obj.purity.get_purity(host, port)

    with ThreadPoolExecutor(max_workers=max(1, threads)) as executor:
        results = list(executor.map(inspect_one, endpoints))

    if as_json:
        _echo_json([
            {
                'endpoint': purity.cache_key,
                'location': location.to_dict() if location else None,
                'purity': purity.to_dict()
            }
            for location, purity in results
        ])
        return

    table = Table(title="Server Inspection")
    table.add_column("Endpoint", style="bold cyan")
    table.add_column("Location")
    table.add_column("Purity", justify="right")
    table.add_column("Level")
    for location, purity in results:
        table.add_row(
            purity.cache_key,
            _location_cell(location),
            _purity_cell(purity),
            purity.purity_level().value
        )
    obj.console.print(table)


@main_cli.command('latency')
@click.argument('endpoint', required=False)
@click.pass_obj
def latency_command(obj: CLIContext, endpoint):
    """TCP latency to HOST:PORT, or delay-test URL latency when omitted"""
    if endpoint:
        parsed = parse_server_address(endpoint)
        if parsed is None:
            raise click.BadParameter(f"expected HOST:PORT, got '{endpoint}'", param_hint='ENDPOINT')
        host, port = parsed
        latency_ms = latency_checks.measure_tcp_latency(host, port, obj.network)
        target = f"{host}:{port}"
    else:
        latency_ms = latency_checks.measure_current_latency(obj.network, obj.config)
        target = obj.config.delay_test_url

    level = latency_checks.get_latency_level(latency_ms)
    click.echo(f"{target}: {latency_checks.format_latency(latency_ms)} ({level.name.lower()})")
    if latency_ms <= 0:
        click.get_current_context().exit(1)


def cli_main():
    """Entry point for console scripts"""
    main_cli()


if __name__ == '__main__':
    cli_main()

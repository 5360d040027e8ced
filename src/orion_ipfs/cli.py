# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/orion_ipfs/cli.py

"""
Orion Command Line Interface

Thin wrapper around the operations module.
"""

import json
from pathlib import Path
import re
import sys

import click
import requests

from orion_ipfs import config as config_module
from orion_ipfs import operations
from orion_ipfs.client import ClientHandle, OrionError
from orion_ipfs.ipfs_api import IPFSAPIError
from orion_ipfs.readiness import wait_until_ready


def handle_api_error(func):
    """Decorator to catch API and connection errors."""
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IPFSAPIError as e:
            click.echo(f"Error: IPFS API error: {e}", err=True)
            sys.exit(1)
        except OrionError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        except requests.exceptions.ConnectionError as e:
            msg = str(e)
            click.echo("Error: Could not connect to the IPFS daemon", err=True)
            if "host=" in msg:
                match = re.search(r"host='([^']+)'", msg)
                if match:
                    click.echo(f"  Host: {match.group(1)}", err=True)
            click.echo("  Is the daemon running? Check --api or the config file", err=True)
            sys.exit(1)
        except requests.exceptions.RequestException as e:
            click.echo(f"Error: Network error: {e}", err=True)
            sys.exit(1)
    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper


def _connect(config_file: Path, api: str):
    """Load config and open a handle, honoring an --api override."""
    cfg = config_module.load_config(config_file)
    if api:
        cfg.api_multiaddr = api
    handle = ClientHandle()
    try:
        handle.ensure(cfg)
    except ValueError as e:
        raise click.UsageError(str(e))
    return cfg, handle


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


config_file_option = click.option(
    "--config-file",
    type=click.Path(exists=True, path_type=Path),
    help="Config file path (default: ~/.config/orion/orion.toml)",
)
api_option = click.option(
    "--api",
    help="Override the daemon API multiaddr (e.g. /ip4/127.0.0.1/tcp/5001)",
)


@click.group()
def cli():
    """Orion IPFS client CLI."""
    pass


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path), required=True)
@click.option("--no-gateways", is_flag=True, help="Don't query public gateways after publishing")
@config_file_option
@api_option
@handle_api_error
def publish(paths: tuple, no_gateways: bool, config_file: Path, api: str) -> None:
    """
    Publish files and directories under a single wrapper directory.

    Examples:

        orion publish report.pdf

        orion publish photos/ notes.txt --no-gateways
    """
    cfg, handle = _connect(config_file, api)
    if no_gateways:
        cfg.skip_gateway_query = True

    wrapper = operations.publish(list(paths), handle, cfg)
    click.echo(f"published {len(paths)} path(s)")
    click.echo(f"wrapper: {wrapper.hash}")
    click.echo(f"size: {wrapper.size}")


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Print raw pins, including indirect ones")
@config_file_option
@api_option
@handle_api_error
def ls(show_all: bool, config_file: Path, api: str) -> None:
    """
    List pinned objects with their sizes and type.
    """
    _, handle = _connect(config_file, api)
    pins = operations.get_object_list(handle)
    if show_all:
        _echo_json([p.to_dict() for p in pins])
        return
    items = operations.get_storage_list(pins, handle)
    _echo_json([item.to_dict() for item in items])


@cli.command()
@click.argument("cid", required=True)
@config_file_option
@api_option
@handle_api_error
def pin(cid: str, config_file: Path, api: str) -> None:
    """
    Pin an object so garbage collection keeps it.
    """
    _, handle = _connect(config_file, api)
    operations.pin_object(cid, handle)
    click.echo(f"pinned {cid}")


@cli.command()
@click.argument("cid", required=True)
@config_file_option
@api_option
@handle_api_error
def unpin(cid: str, config_file: Path, api: str) -> None:
    """
    Unpin an object (run 'orion gc' to reclaim its space).
    """
    _, handle = _connect(config_file, api)
    operations.unpin_object(cid, handle)
    click.echo(f"unpinned {cid}")


@cli.command("import")
@click.argument("cid", required=True)
@config_file_option
@api_option
@handle_api_error
def import_(cid: str, config_file: Path, api: str) -> None:
    """
    Import an object from the network by pinning it recursively.
    """
    _, handle = _connect(config_file, api)
    operations.import_object_by_hash(cid, handle)
    click.echo(f"imported {cid}")


@cli.command()
@click.argument("cid", required=True)
@config_file_option
@api_option
@handle_api_error
def stat(cid: str, config_file: Path, api: str) -> None:
    """
    Show the size breakdown of an object.
    """
    _, handle = _connect(config_file, api)
    _echo_json(operations.get_object_stat(cid, handle).to_dict())


@cli.command()
@config_file_option
@api_option
@handle_api_error
def repo(config_file: Path, api: str) -> None:
    """
    Show repository statistics.
    """
    _, handle = _connect(config_file, api)
    click.echo(operations.get_repo_info(handle).to_json())


@cli.command()
@config_file_option
@api_option
@handle_api_error
def peers(config_file: Path, api: str) -> None:
    """
    List connected swarm peers.
    """
    _, handle = _connect(config_file, api)
    _echo_json([p.to_dict() for p in operations.get_peers_info(handle)])


@cli.command("id")
@config_file_option
@api_option
@handle_api_error
def id_(config_file: Path, api: str) -> None:
    """
    Show the identity of the local node.
    """
    _, handle = _connect(config_file, api)
    _echo_json(operations.get_peer(handle).to_dict())


@cli.command()
@click.argument("cid", required=True)
@config_file_option
@api_option
@handle_api_error
def providers(cid: str, config_file: Path, api: str) -> None:
    """
    List peers providing an object.
    """
    _, handle = _connect(config_file, api)
    _echo_json([p.to_dict() for p in operations.get_peers_with_object(cid, handle)])


@cli.command()
@config_file_option
@api_option
@handle_api_error
def gc(config_file: Path, api: str) -> None:
    """
    Run the garbage collector.
    """
    _, handle = _connect(config_file, api)
    removed = operations.run_garbage_collector(handle)
    click.echo(f"removed {len(removed)} object(s)")


@cli.command()
@click.argument("name", required=True)
@config_file_option
@api_option
@handle_api_error
def resolve(name: str, config_file: Path, api: str) -> None:
    """
    Resolve an IPNS name.
    """
    _, handle = _connect(config_file, api)
    click.echo(operations.resolve_name(name, handle))


@cli.command()
@click.argument("addr", required=True)
@config_file_option
@api_option
@handle_api_error
def connect(addr: str, config_file: Path, api: str) -> None:
    """
    Connect to a peer by multiaddr.

    Example:

        orion connect /ip4/192.168.0.22/tcp/4001/p2p/12D3KooW...
    """
    _, handle = _connect(config_file, api)
    try:
        result = operations.connect_to(addr, handle)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="ADDR")
    for line in result:
        click.echo(line)


@cli.command()
@click.argument("cid", required=True)
@click.option("--output", type=click.Path(file_okay=False, path_type=Path), required=True)
@config_file_option
@api_option
@handle_api_error
def get(cid: str, output: Path, config_file: Path, api: str) -> None:
    """
    Download an object into a directory.
    """
    _, handle = _connect(config_file, api)
    dest = operations.save_file_to_path(cid, output, handle)
    click.echo(f"saved {cid} to {dest}")


@cli.command()
@click.option("--timeout", type=int, help="Attempts, one per second (default: from config)")
@config_file_option
@api_option
@handle_api_error
def wait(timeout: int, config_file: Path, api: str) -> None:
    """
    Wait until the daemon answers API calls.
    """
    cfg, handle = _connect(config_file, api)
    identity = wait_until_ready(timeout or cfg.ready_timeout, handle=handle)
    click.echo(f"ready: {identity.id}")


@cli.command()
@config_file_option
@click.option(
    "--validate-only",
    is_flag=True,
    help="Only validate config, don't display it",
)
def config(config_file: Path, validate_only: bool) -> None:
    """
    Display and validate Orion configuration.

    Examples:

        orion config                    # Display config with validation

        orion config --validate-only    # Just check for errors
    """
    config_path = config_file or config_module.default_config_path()

    try:
        cfg = config_module.load_config(config_file)
    except config_module.ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    errors, warnings = cfg.validate()

    if not validate_only:
        click.echo(f"Config file: {config_path}{'' if config_path.exists() else ' (not found, using defaults)'}")
        click.echo()
        click.echo("Settings:")
        click.echo(f"  api: {cfg.api_multiaddr} (timeout {cfg.api_timeout}s)")
        click.echo(f"  readiness timeout: {cfg.ready_timeout}")
        click.echo(f"  gateway query: {'disabled' if cfg.skip_gateway_query else 'enabled'}")
        if cfg.gateways:
            click.echo("Gateways:")
            for url in cfg.gateways:
                click.echo(f"  {url}")
        click.echo()

    if errors:
        click.echo("Errors:", err=True)
        for e in errors:
            click.echo(f"  ✗ {e}", err=True)
    if warnings:
        click.echo("Warnings:")
        for w in warnings:
            click.echo(f"  ⚠ {w}")
    if not errors and not warnings:
        click.echo("✓ Config is valid")
    sys.exit(1 if errors else 0)

"""
CLI interface for asaprov.

Provides commands to plan, apply, refresh and destroy declared Stream
Analytics jobs.

Resources are declared in YAML files (see asaprov.declarations) and their
state is kept per address in the configured state directory.
"""

import json
import sys
from pathlib import Path

import click
import yaml
from azure.core.exceptions import AzureError

from asaprov import __version__
from asaprov.client import build_arm_client
from asaprov.config import ConfigError, get_asaprov_home, load_config
from asaprov.declarations import load_declarations
from asaprov.errors import AsaprovError
from asaprov.handlers import HandlerRegistry, PlanAction
from asaprov.schemas import ResourceData
from asaprov.state_store import FileStateStore
from asaprov.utils import setup_logging


# Failures reported at the CLI boundary; anything else is a bug and keeps its traceback.
REPORTED_ERRORS = (AsaprovError, AzureError, ConfigError)


@click.group()
@click.version_option(version=__version__, prog_name="asaprov")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level")
@click.pass_context
def main(ctx, verbose: bool):
    """
    asaprov - Declarative Azure Stream Analytics job provisioning.

    Apply YAML job declarations against the Azure management API.
    """
    ctx.ensure_object(dict)
    try:
        config = load_config()
    except (ConfigError, FileNotFoundError) as e:
        # init works without a config; other commands check ctx.obj["config"]
        ctx.obj["config_error"] = str(e)
        setup_logging("DEBUG" if verbose else "WARNING")
        return

    ctx.obj["config"] = config
    setup_logging(
        "DEBUG" if verbose else config.log_level,
        config.log_format,
        config.log_path,
    )


def _require_config(ctx):
    if "config" not in ctx.obj:
        click.echo(f"✗ Config not loaded: {ctx.obj.get('config_error', 'Unknown error')}", err=True)
        click.echo("Run 'asaprov init' to create a configuration file.", err=True)
        raise SystemExit(1)
    return ctx.obj["config"]


def _store(ctx) -> FileStateStore:
    return FileStateStore(_require_config(ctx).state_path)


def _client(ctx):
    config = _require_config(ctx)
    try:
        return build_arm_client(config)
    except ConfigError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)


def _load(path: Path):
    try:
        return load_declarations(path)
    except (AsaprovError, FileNotFoundError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)


def _handler_for(address: str):
    try:
        return HandlerRegistry.create_default().get(address.split(".", 1)[0])
    except KeyError as e:
        click.echo(f"✗ {e.args[0]}", err=True)
        raise SystemExit(1)


def _prior(store: FileStateStore, address: str):
    try:
        return store.load(address)
    except AsaprovError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)


def _tracked(store: FileStateStore, address: str):
    state = _prior(store, address)
    if state is None:
        click.echo(f"✗ {address} is not tracked in state", err=True)
        raise SystemExit(1)
    return state


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize asaprov configuration."""
    home = get_asaprov_home()
    if not home.exists():
        home.mkdir(parents=True)

    cfg_path = home / "config.yaml"
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    default_cfg = {
        "subscription_id": None,
        "state_dir": str(home / "state"),
        "log_level": "INFO",
        "log_format": "pretty",
        "log_file": None,
        "env_file": str(home / ".env"),
    }
    cfg_path.write_text(yaml.safe_dump(default_cfg, sort_keys=False))

    env_path = home / ".env"
    if not env_path.exists():
        env_path.write_text(
            "# AZURE_SUBSCRIPTION_ID=...\n"
            "# AZURE_TENANT_ID=...\n"
            "# AZURE_CLIENT_ID=...\n"
            "# AZURE_CLIENT_SECRET=...\n"
        )

    click.echo(f"Initialized asaprov config at {cfg_path}")


@main.command("plan")
@click.argument("file", type=click.Path(path_type=Path))
@click.pass_context
def plan(ctx, file: Path):
    """
    Show what apply would do, without calling Azure.

    Examples:

        asaprov plan jobs.yaml
    """
    store = _store(ctx)
    registry = HandlerRegistry.create_default()

    for decl in _load(file):
        handler = registry.get(decl.resource_type)
        data = ResourceData(decl.config, prior=_prior(store, decl.address))
        action = handler.plan(data)

        detail = ""
        if action == PlanAction.REPLACE:
            detail = f" (forced by: {', '.join(data.force_new_changes())})"
        elif action == PlanAction.UPDATE and data.has_change("job_state"):
            detail = f" (job_state: {data.prior.attributes.get('job_state')} -> {decl.config.job_state.value})"
        click.echo(f"  {action.value:<8} {decl.address}{detail}")


@main.command("apply")
@click.argument("file", type=click.Path(path_type=Path))
@click.pass_context
def apply(ctx, file: Path):
    """
    Create or update every job declared in FILE.

    State is saved after each job, including when a job fails part-way
    through, so a partially created job can still be destroyed.

    Examples:

        asaprov apply jobs.yaml
    """
    declarations = _load(file)
    store = _store(ctx)
    client = _client(ctx)
    registry = HandlerRegistry.create_default()

    for decl in declarations:
        handler = registry.get(decl.resource_type)
        data = ResourceData(decl.config, prior=_prior(store, decl.address))
        try:
            action = handler.apply(data, client)
        except REPORTED_ERRORS as e:
            store.persist(decl.address, data.to_state())
            click.echo(f"✗ {decl.address} failed: {e}", err=True)
            if data.id:
                click.echo(
                    f"  {data.id} is tracked in state; "
                    f"run 'asaprov destroy {decl.address}' to remove it.",
                    err=True,
                )
            raise SystemExit(1)

        store.persist(decl.address, data.to_state())
        click.echo(f"✓ {decl.address} {action.value}d (job_state: {data.get('job_state')})")


@main.command("refresh")
@click.argument("address")
@click.pass_context
def refresh(ctx, address: str):
    """
    Re-read a tracked job from Azure and update its state.

    ADDRESS is <resource_type>.<label>, e.g. stream_analytics_job.clickstream
    """
    store = _store(ctx)
    data = ResourceData(prior=_tracked(store, address))
    handler = _handler_for(address)

    try:
        handler.read(data, _client(ctx))
    except REPORTED_ERRORS as e:
        click.echo(f"✗ {address} refresh failed: {e}", err=True)
        raise SystemExit(1)

    store.persist(address, data.to_state())
    click.echo(f"✓ {address} refreshed (job_state: {data.get('job_state')})")


@main.command("destroy")
@click.argument("address")
@click.pass_context
def destroy(ctx, address: str):
    """
    Delete a tracked job and, with it, all of its children.

    State is only removed when the delete succeeds.
    """
    store = _store(ctx)
    data = ResourceData(prior=_tracked(store, address))
    handler = _handler_for(address)

    try:
        handler.delete(data, _client(ctx))
    except REPORTED_ERRORS as e:
        click.echo(f"✗ {address} destroy failed: {e}", err=True)
        raise SystemExit(1)

    store.persist(address, data.to_state())
    click.echo(f"✓ {address} destroyed")


@main.command("show")
@click.argument("address")
@click.pass_context
def show(ctx, address: str):
    """Print the saved state of a tracked job as JSON."""
    state = _tracked(_store(ctx), address)
    click.echo(json.dumps(state.to_dict(), indent=2, sort_keys=True))


@main.group("state")
def state_group():
    """Inspect local state."""
    pass


@state_group.command("list")
@click.pass_context
def list_state(ctx):
    """List tracked resource addresses."""
    addresses = _store(ctx).list_addresses()
    if not addresses:
        click.echo("No resources tracked.")
        return
    for address in addresses:
        click.echo(address)


if __name__ == "__main__":
    sys.exit(main())

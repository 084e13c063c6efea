from pathlib import Path
from typing import Optional

import click

from painlab_nidaq.util import DEFAULT_LOGLEVEL, format_error_response


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        if isinstance(sub_cmd, click.Group):
            click.echo(f"{prefix}└── {sub}")
            print_tree(sub_cmd, prefix + "    ", ctx)
        else:
            click.echo(f"{prefix}└── {sub}")


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


@click.group()
@tree_option
def cli():
    """painlab-nidaq - PainLab device bridge for an NI-DAQ stimulator.

    - Streams stimulation current/voltage loopback to the PainLab hub

    - Applies stimulation control frames from the hub to the hardware
    """
    pass


@cli.command()
@click.option(
    "--config-dir",
    "-cd",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory searched first for configuration files",
)
@click.option(
    "--mock/--no-mock",
    "-m/",
    default=False,
    help="Use the software MockDAQ instead of NI hardware (default: disabled)",
)
@click.option(
    "--settle-delay",
    "-sd",
    type=float,
    default=None,
    help="Seconds to wait after each stimulation completes (default: from config)",
)
@click.option(
    "--log-to-file/--no-log-to-file",
    "-ltf/",
    default=True,
    help="Enable/disable logging to file (default: enabled)",
)
@click.option(
    "--log-to-stdout/--no-log-to-stdout",
    "-lts/",
    default=True,
    help="Enable/disable console logging (default: enabled)",
)
@click.option(
    "--log-path",
    "-lp",
    default="",
    help="Custom path for log file (default: ~/.painlab/device.log)",
)
@click.option(
    "--clear-prev-log/--no-clear-prev-log",
    "-c/",
    default=True,
    help="Clear previous log file on startup (default: enabled)",
)
@click.option(
    "--log-level",
    "-ll",
    default=DEFAULT_LOGLEVEL,
    help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR) (default: INFO)",
)
def device(**kwargs):
    """Run the device process.

    Registers with the PainLab hub, then:

    - streams a data frame per acquisition cycle

    - applies control frames as they arrive

    Runs until Ctrl-C or an acquisition fault.
    """
    from painlab_nidaq.server import run_device

    kwargs["settle_delay_s"] = kwargs.pop("settle_delay")
    run_device(**kwargs)


@cli.command()
def daq():
    """List NI-DAQmx devices known to the local driver."""
    from painlab_nidaq.util.check_hw import list_daq_devices

    devices = list_daq_devices()

    click.echo("\nAvailable NI-DAQmx devices:")
    click.echo("---------------------------")

    if not devices:
        click.echo("No NI-DAQmx devices found")
        click.echo("")
        return

    for name, info in devices.items():
        click.echo(f"\nDevice: {name}")
        click.echo(f"Product: {info['product_type']}")
        click.echo(f"Serial: {info['serial_num']}")
    click.echo("")


@cli.group()
@tree_option
def config():
    """Manage device configuration files."""
    pass


@config.command()
@click.option(
    "--config-dir",
    "-cd",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory searched first for configuration files",
)
def show(config_dir: Optional[Path]):
    """Show the resolved configuration and where each file came from."""
    from loguru import logger

    from painlab_nidaq.system import load_device_config
    from painlab_nidaq.types import ConfigError

    logger.disable("painlab_nidaq")
    try:
        cfg = load_device_config(config_dir)
    except ConfigError:
        click.echo(f"Error: {format_error_response()}", err=True)
        raise SystemExit(1)
    finally:
        logger.enable("painlab_nidaq")

    ch = cfg.channel
    click.echo("\nChannel configuration:")
    click.echo("----------------------")
    click.echo(f"Device: {ch.device_name}")
    click.echo(f"Switch method: {ch.switch_channel_method.value}")
    click.echo(f"Analog in: {ch.input_channels}")
    click.echo(f"Analog out: {ch.output_channels}")
    click.echo(f"Switch lines: {ch.switch_line_channels or '-'}")
    click.echo(
        f"Timing: {ch.sample_rate} Hz, {ch.samples_per_frame} samples per frame"
    )
    click.echo(f"Settle delay: {ch.settle_delay_s} s")
    click.echo("\nNetwork configuration:")
    click.echo("----------------------")
    click.echo(f"Hub: {cfg.network.endpoint}")
    click.echo("\nSources:")
    for name, path in cfg.sources.items():
        click.echo(f"  {name}: {path}")
    click.echo("")


@config.command()
@click.option(
    "--dest",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Target directory (default: ~/.painlab)",
)
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Replace existing files (default: disabled)",
)
def install(dest: Optional[Path], overwrite: bool):
    """Copy the bundled default configuration to the user directory."""
    from painlab_nidaq.system import install_default_config

    try:
        written = install_default_config(dest, overwrite=overwrite)
    except OSError:
        click.echo(f"Error: {format_error_response()}", err=True)
        raise SystemExit(1)
    if written:
        click.echo(f"Installed {len(written)} configuration file(s):")
        for path in written:
            click.echo(f"  - {path}")
    else:
        click.echo("No configuration files to install")

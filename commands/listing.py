"""Listing command: show the groups and lights known to the bridge."""

import click

from core.errors import HueError
from models.utils import brightness_percent, get_bridge


def format_light(light_id: str, light) -> str:
    """Render one light as a single status line."""
    line = f"[{light_id}] {light.name}: {light.model} "
    if not light.is_on:
        return line + "Off"
    line += f"On Brightness {brightness_percent(light.brightness)}% "
    if light.is_color:
        line += f"Hue: {light.hue} Sat: {light.saturation} Temp: {light.temperature}"
    return line.rstrip()


@click.command(name='list')
@click.pass_context
def list_command(ctx: click.Context):
    """List all Groups and Lights that can be targeted."""
    bridge = get_bridge(ctx)

    try:
        groups = bridge.groups()
        lights = bridge.lights()
    except HueError as e:
        raise click.ClickException(f"Could not read from the bridge: {e}") from e

    click.secho("Groups List", fg='cyan', bold=True)
    click.echo("================")
    for group_id, group in sorted(groups.items()):
        click.echo(
            f"[{group_id}] {group.name}: {group.group_type.value} Lights {len(group.lights)}"
        )

    click.echo()
    click.secho("Lights List", fg='cyan', bold=True)
    click.echo("================")
    for light_id, light in sorted(lights.items()):
        click.echo(format_light(light_id, light))

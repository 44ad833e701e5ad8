"""
Control command for changing every device in a group at once.

Each member is switched to manual mode, all requested changes are staged,
and then a single update() pushes them per device.
"""

from datetime import timedelta

import click

from core.errors import FormatError, HueError
from models.color import parse_hex
from models.utils import find_similar_strings, get_bridge, parse_rgb


def apply_changes(group, on: bool | None = None, brightness: int | None = None,
                  saturation: int | None = None, temperature: int | None = None,
                  rgb: tuple[int, int, int] | None = None, hex_value: str | None = None,
                  transition: timedelta = timedelta(0)):
    """Stage the requested changes on each member of a group and push them.

    Colour changes are skipped for lights without colour support.

    Raises:
        HueError: on the first device that fails to update
    """
    for control in group.controls:
        control.manual = True
        if on is not None:
            control.set_on(on)
        control.update()

    for light in group.lights:
        light.manual = True
        if on is not None:
            light.set_on(on)
        if brightness is not None:
            light.set_brightness(brightness)
        light.set_transition(transition)
        if light.is_color:
            if saturation is not None:
                light.set_saturation(saturation)
            if temperature is not None:
                light.set_temperature(temperature)
            if rgb is not None:
                light.set_rgb(*rgb)
            if hex_value is not None:
                light.set_hex(hex_value)
        light.update()


@click.command(name='set')
@click.argument('target')
@click.option('--on/--off', 'power', default=None, help='Turn the target on or off')
@click.option('--hex', 'hex_value', help='Colour as #RRGGBB')
@click.option('--rgb', help='Colour as R,G,B (each 0-255)')
@click.option('--sat', type=click.IntRange(0, 255), help='Colour saturation (0-255)')
@click.option('--temp', type=click.IntRange(0, 65535), help='Colour temperature (0-65535)')
@click.option('--bright', type=click.IntRange(0, 255), help='Brightness (0-255)')
@click.option('--trans', type=click.FloatRange(min=0), default=0.0,
              help='Transition time in seconds (default: instant)')
@click.pass_context
def set_command(ctx: click.Context, target: str, power: bool | None, hex_value: str | None,
                rgb: str | None, sat: int | None, temp: int | None, bright: int | None,
                trans: float):
    """Change the lights and controls of a room or zone.

    \b
    Examples:
      huectl set "Living room" --on --bright 200
      huectl set Kitchen --hex "#FF8000" --trans 2
      huectl set Bedroom --off
    """
    try:
        colour = parse_rgb(rgb) if rgb else None
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--rgb') from e
    if hex_value:
        try:
            parse_hex(hex_value)
        except FormatError as e:
            raise click.BadParameter(str(e), param_hint='--hex') from e

    bridge = get_bridge(ctx)
    try:
        group = bridge.group_by_name(target)
        if group is None:
            click.secho(f"Could not find target \"{target}\"", fg='red', err=True)
            suggestions = find_similar_strings(target, [g.name for g in bridge.groups().values()])
            if suggestions:
                click.secho("Did you mean one of these?", fg='yellow', err=True)
                for suggestion in suggestions:
                    click.secho(f"  • {suggestion}", fg='green', err=True)
            ctx.exit(1)

        apply_changes(
            group,
            on=power,
            brightness=bright,
            saturation=sat,
            temperature=temp,
            rgb=colour,
            hex_value=hex_value,
            transition=timedelta(seconds=trans),
        )
    except HueError as e:
        raise click.ClickException(f"Error changing \"{target}\": {e}") from e

    click.secho(f"✓ Updated {group.name}", fg='green')

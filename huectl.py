#!/usr/bin/env python3
"""
Hue Bridge Controller CLI
List and change the lights, controls and groups connected to a Hue bridge.
"""

import click

from core.config import ENV_ADDRESS, ENV_KEY, ENV_TIMEOUT
from core.logging_conf import configure_logging

from commands.control import set_command
from commands.listing import list_command


@click.group(
    context_settings={
        'help_option_names': ['-h', '--help'],
    }
)
@click.version_option(version='1.0.0', prog_name='huectl')
@click.option('--address', '-a', envvar=ENV_ADDRESS, help='Bridge IP address or hostname')
@click.option('--key', '-k', envvar=ENV_KEY, help='Bridge API key')
@click.option('--timeout', envvar=ENV_TIMEOUT, type=float, default=None,
              help='Seconds allowed per request (default: 10)')
@click.option('--verbose', '-v', is_flag=True, help='Log every bridge request')
@click.pass_context
def cli(ctx: click.Context, address: str | None, key: str | None,
        timeout: float | None, verbose: bool):
    """Hue Bridge Controller - list and change lights, controls and groups.

Connection settings: options → environment (HUE_BRIDGE_ADDR, HUE_BRIDGE_KEY)
→ ~/.huectl/config.json"""
    configure_logging('debug' if verbose else 'warning')
    ctx.obj = {'address': address, 'key': key, 'timeout': timeout}


cli.add_command(list_command)
cli.add_command(set_command)


if __name__ == '__main__':
    cli()

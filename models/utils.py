"""Utility functions for the command-line front-end.

This module contains helper functions used by the CLI commands:
- get_bridge: Build a Bridge from the CLI context settings
- brightness_percent: Convert 0-254 brightness to a percentage
- parse_rgb: Parse 'R,G,B' option values
- similarity_score / find_similar_strings: Fuzzy matching for target names
"""

import click

from core.config import get_bridge_settings
from core.errors import ConfigError


def get_bridge(ctx: click.Context):
    """Create a Bridge from the options stored on the CLI context.

    Raises:
        click.ClickException: if the bridge address or key is missing
    """
    # Import here to avoid a models -> core.bridge -> models cycle
    from core.bridge import Bridge

    options = ctx.find_root().obj or {}
    try:
        settings = get_bridge_settings(
            options.get('address'), options.get('key'), options.get('timeout')
        )
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    return Bridge.from_settings(settings)


def brightness_percent(brightness: int) -> int:
    """Convert a 0-254 bridge brightness level to a whole percentage."""
    return int((brightness / 254.0) * 100.0)


def parse_rgb(value: str) -> tuple[int, int, int]:
    """Parse a comma separated 'R,G,B' string with each channel in 0-255.

    Raises:
        ValueError: if there are not exactly three valid channels
    """
    parts = [p.strip() for p in value.strip().split(',')]
    if len(parts) != 3:
        raise ValueError(f'Invalid RGB value "{value}"')
    channels = []
    for label, part in zip('RGB', parts):
        if not part.isdigit() or int(part) > 255:
            raise ValueError(f'Invalid RGB "{label}" value "{value}"')
        channels.append(int(part))
    r, g, b = channels
    return r, g, b


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Characters of s1 found in order within s2
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            j += 1
            if s2_lower[j - 1] == char:
                matches += 1
                break

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0


def find_similar_strings(target: str, candidates: list[str], limit: int = 5) -> list[str]:
    """Return candidates resembling target, most similar first."""
    scored = [(candidate, similarity_score(target, candidate)) for candidate in candidates]
    matches = sorted((item for item in scored if item[1] > 0), key=lambda x: x[1], reverse=True)
    return [c for c, _ in matches[:limit]]

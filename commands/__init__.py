"""CLI command modules.

This package contains:
- listing: List groups and lights (list)
- control: Change every device in a group (set)
"""

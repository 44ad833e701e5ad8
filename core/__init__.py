"""Core functionality for the bridge client.

This package contains:
- bridge: Bridge class owning the lazily populated resource cache
- sync: Synchronizer pushing dirty records and refreshing clean ones
- transport: HTTP transport and acknowledgement checking
- config: Connection settings and address parsing
- errors: Exception types
- logging_conf: structlog configuration for the CLI
"""

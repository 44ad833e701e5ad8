"""Data models, colour conversion and utility functions.

This package contains:
- gamut, color: Colour gamut triangles and RGB/hex/xy conversion
- state: Dirty attributes, enumerations and state snapshots
- record, device, light, sensor, group: Resource records
- decode: Light/Control factory for /lights entries
- types, utils: TypedDicts and CLI helpers
"""

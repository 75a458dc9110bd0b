"""Bonding curve launchpad - Python implementation."""

__version__ = "0.1.0"

from launchpad.program import LaunchpadProgram, get_default_program  # noqa: E402

__all__ = ["LaunchpadProgram", "get_default_program", "__version__"]

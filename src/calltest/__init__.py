"""pytest integration for calltape (registered through the ``pytest11`` entry point)."""

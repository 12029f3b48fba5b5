"""Version 1 of the Telloom HTTP API. Each module exposes a ``router``."""

"""HTTP API of the Telloom server."""

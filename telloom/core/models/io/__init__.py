"""
I/O models (request and response schemas) for the HTTP API.

These Pydantic models define the contract between the API and its clients
and are kept separate from the database entities.
"""

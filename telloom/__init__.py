"""Telloom.

Backend for a video storytelling platform. A *sharer* records video
responses to guided prompts grouped into topics; *listeners* watch a
sharer's stories once granted access; *executors* manage a sharer's
content on their behalf.

Core subpackages
----------------

- ``telloom.core``:

  - Database entities, sessions and repositories (SQLModel, async).
  - Domain enumerations and I/O models.
  - Domain errors, logging, Logfire monitoring and the signed URL cache.

- ``telloom.integrations``:

  - HTTP clients for the hosted auth provider, the video API (uploads,
    assets, text tracks, webhook verification), transactional email and
    object storage.

- ``telloom.server``:

  - The FastAPI application, its routers, request dependencies and the
    service layer implementing the connection workflows (invitations,
    follow requests, listener/executor links) and video ingestion.
"""

__version__ = "0.1.0"

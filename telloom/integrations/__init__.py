"""Clients for the external services Telloom depends on.

- auth_client: hosted auth provider (user lookup by access token)
- mux: video upload, asset management and webhook verification
- loops: transactional email
- storage: signed URLs and object removal
"""

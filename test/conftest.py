from __future__ import annotations

import os
from pathlib import Path

import httpx
import pytest
from dotenv import load_dotenv

TEST_ROOT = Path(__file__).resolve().parent

# test/.env wins over the committed defaults in test/.env.example
for env_file in (".env", ".env.example"):
    load_dotenv(TEST_ROOT / env_file, override=False)

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0"})


def _is_offline_target(url) -> bool:
    """Relative ASGI paths, loopback hosts and ``mock*`` hosts never leave the machine."""
    text = str(url)
    if text.startswith("/"):
        return True
    host = httpx.URL(text).host
    return host in LOCAL_HOSTS or host.startswith("mock")


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    real_sync = httpx._client.Client.request
    real_async = httpx._client.AsyncClient.request

    def guarded_sync(self, method, url, *args, **kwargs):
        if not _is_offline_target(url):
            raise RuntimeError(f"External HTTP blocked by global offline guard: {url}")
        return real_sync(self, method, url, *args, **kwargs)

    async def guarded_async(self, method, url, *args, **kwargs):
        if not _is_offline_target(url):
            raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url}")
        return await real_async(self, method, url, *args, **kwargs)

    monkeypatch.setattr(httpx._client.Client, "request", guarded_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", guarded_async, raising=True)

from __future__ import annotations

from collections.abc import Iterator

import pytest

from journal_backend.config import settings


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def restore_settings() -> Iterator[None]:
    # Tests tweak the shared settings object; put every field back afterwards.
    snapshot = settings.model_dump()
    yield
    for key, value in snapshot.items():
        setattr(settings, key, value)

"""
Shared test fixtures and utilities.
"""
import asyncio
import io
import pytest
from PIL import Image
from design_intake.core import config
from design_intake.repositories.storage_repository import StorageRepository


class FakeStorage(StorageRepository):
    """
    In-memory stand-in for the object storage backend.

    Uploads report the configured progress steps and resolve with a URL.
    Individual files can be made to fail or held until released.
    """

    def __init__(self, progress_steps=(25, 50, 75, 100)):
        self.progress_steps = progress_steps
        self.failures = {}
        self.uploads = []
        self._gates = {}
        self._started = {}

    def fail(self, filename: str, error: Exception) -> None:
        self.failures[filename] = error

    def hold(self, filename: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[filename] = gate
        self._started[filename] = asyncio.Event()
        return gate

    async def wait_started(self, filename: str) -> None:
        await self._started[filename].wait()

    async def upload(self, key, content, content_type, on_progress):
        filename = key.rsplit('/', 1)[-1].split('_', 1)[1]
        self.uploads.append((key, content, content_type))

        if filename in self._gates:
            self._started[filename].set()
            await self._gates[filename].wait()

        for step in self.progress_steps:
            on_progress(step)
            await asyncio.sleep(0)

        if filename in self.failures:
            raise self.failures[filename]
        return f"https://files.example.com/{key}"


def make_image(width: int, height: int, image_format: str = 'JPEG', mode: str = 'RGB') -> bytes:
    """Noise image; noise does not compress well, so large sizes stay large."""
    image = Image.effect_noise((width, height), 100).convert(mode)
    buffer = io.BytesIO()
    if image_format == 'JPEG':
        image.save(buffer, format='JPEG', quality=95)
    else:
        image.save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def large_jpeg():
    """A JPEG well above the compression threshold and the maximum edge."""
    return make_image(2400, 1800)


@pytest.fixture
def small_png():
    return make_image(64, 64, image_format='PNG')


@pytest.fixture
def reset_settings(monkeypatch):
    """Restore the environment and reload settings after a test changed them."""
    yield
    monkeypatch.undo()
    config.settings = config.Settings()

"""
Unit tests for BatchRegistry.
"""
from unittest.mock import Mock
import pytest
from design_intake.core.exceptions import BatchNotFoundException
from design_intake.models.file_entry import SelectedFile
from design_intake.services.batch_registry import BatchRegistry
from design_intake.services.compression_service import ImageCompressionService


class TestBatchRegistry:
    """Test suite for BatchRegistry."""

    @pytest.fixture
    def registry(self, fake_storage):
        return BatchRegistry(storage=fake_storage, compressor=ImageCompressionService())

    def test_create_uses_configured_default(self, registry):
        """Test new batches default to the configured file limit."""
        session = registry.create()

        assert session.uploader.max_files == 10
        assert session.uploaded_files == []
        assert registry.get(session.batch_id) is session

    def test_create_with_custom_limit(self, registry):
        session = registry.create(max_files=3)

        assert session.uploader.max_files == 3

    def test_batches_are_independent(self, registry):
        """Test each batch gets its own uploader and notifier."""
        first = registry.create()
        second = registry.create()

        assert first.batch_id != second.batch_id
        assert first.uploader is not second.uploader
        assert first.notifier is not second.notifier

    def test_get_unknown_batch(self, registry):
        with pytest.raises(BatchNotFoundException) as exc_info:
            registry.get("nope")
        assert "Batch 'nope' not found" in str(exc_info.value)

    def test_delete(self, registry):
        session = registry.create()

        registry.delete(session.batch_id)

        with pytest.raises(BatchNotFoundException):
            registry.get(session.batch_id)

    def test_delete_unknown_batch(self, registry):
        with pytest.raises(BatchNotFoundException):
            registry.delete("nope")

    @pytest.mark.asyncio
    async def test_session_receives_uploaded_files(self, registry):
        """Test the session keeps the latest published list."""
        session = registry.create()

        await session.uploader.select_files([
            SelectedFile(name="brief.pdf", content=b"pdf", content_type="application/pdf")
        ])

        assert [f.name for f in session.uploaded_files] == ["brief.pdf"]

    def test_rejection_is_recorded_on_session(self):
        """Test capacity toasts land in the session's notifier."""
        registry = BatchRegistry(storage=Mock(), compressor=Mock())
        session = registry.create(max_files=1)

        result = session.uploader.stage_files([
            SelectedFile(name="a.pdf", content=b"a"),
            SelectedFile(name="b.pdf", content=b"b"),
        ])

        assert result is None
        assert [n.title for n in session.notifier.notifications] == ["Cannot add files"]


class TestBatchRegistryExpiry:
    """Test suite for idle batch expiry."""

    @pytest.fixture
    def now(self):
        return [1000.0]

    @pytest.fixture
    def registry(self, fake_storage, now):
        return BatchRegistry(storage=fake_storage, compressor=ImageCompressionService(), clock=lambda: now[0])

    def test_idle_batch_expires_on_create(self, registry, now):
        """Test a batch idle past the timeout is dropped when another opens."""
        stale = registry.create()
        now[0] += 3601

        fresh = registry.create()

        assert len(registry) == 1
        assert registry.get(fresh.batch_id) is fresh
        with pytest.raises(BatchNotFoundException):
            registry.get(stale.batch_id)

    def test_access_keeps_batch_alive(self, registry, now):
        session = registry.create()
        now[0] += 3000
        registry.get(session.batch_id)
        now[0] += 3000

        assert registry.expire_idle() == 0
        assert registry.get(session.batch_id) is session

    def test_processing_batch_is_kept(self, registry, now):
        """Test batches with unfinished entries survive the sweep."""
        session = registry.create()
        session.uploader.stage_files([SelectedFile(name="a.pdf", content=b"a")])
        now[0] += 7200

        assert registry.expire_idle() == 0
        assert len(registry) == 1

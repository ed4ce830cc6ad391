"""
Unit tests for FileValidationService.
Tests file type, size and selection validation.
"""
import pytest
from design_intake.core import config
from design_intake.core.exceptions import ValidationException
from design_intake.models.file_entry import SelectedFile
from design_intake.services.file_service import FileValidationService, format_size


class TestFormatSize:
    """Test suite for format_size."""

    @pytest.mark.parametrize("size,expected", [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1536, "1.5 KB"),
        (2 * 1024 * 1024, "2 MB"),
        (1234567, "1.18 MB"),
        (3 * 1024 ** 3, "3 GB"),
    ])
    def test_format_size(self, size, expected):
        assert format_size(size) == expected


class TestFileValidationService:
    """Test suite for FileValidationService."""

    @pytest.fixture
    def file_service(self):
        """Create FileValidationService instance."""
        return FileValidationService()

    def test_validate_selection_success(self, file_service):
        """Test a mixed selection of accepted types."""
        files = [
            SelectedFile(name="logo.PNG", content=b"png", content_type="image/png"),
            SelectedFile(name="brief.pdf", content=b"pdf", content_type="application/pdf"),
            SelectedFile(name="voice-note.webm", content=b"webm", content_type="audio/webm"),
        ]
        file_service.validate_selection(files)
        # No exception means success

    def test_validate_selection_empty(self, file_service):
        """Test an empty selection is rejected."""
        with pytest.raises(ValidationException) as exc_info:
            file_service.validate_selection([])
        assert "No files selected" in str(exc_info.value)

    def test_validate_selection_rejects_all_on_one_bad_file(self, file_service):
        """Test one invalid file rejects the selection and names the file."""
        files = [
            SelectedFile(name="logo.png", content=b"png", content_type="image/png"),
            SelectedFile(name="setup.exe", content=b"MZ", content_type="application/octet-stream"),
        ]
        with pytest.raises(ValidationException) as exc_info:
            file_service.validate_selection(files)
        assert "File type not allowed: setup.exe" in str(exc_info.value)

    def test_validate_file_without_extension(self, file_service):
        """Test files without an extension are rejected."""
        with pytest.raises(ValidationException):
            file_service.validate_file(SelectedFile(name="README", content=b"text"))

    def test_validate_file_empty_name(self, file_service):
        """Test blank names are rejected."""
        with pytest.raises(ValidationException) as exc_info:
            file_service.validate_file(SelectedFile(name="  ", content=b"x"))
        assert "cannot be empty" in str(exc_info.value)

    def test_validate_file_empty_content(self, file_service):
        """Test zero-byte files are rejected."""
        with pytest.raises(ValidationException) as exc_info:
            file_service.validate_file(SelectedFile(name="blank.pdf", content=b""))
        assert "File is empty" in str(exc_info.value)

    def test_validate_file_too_large(self, file_service, monkeypatch, reset_settings):
        """Test files over the configured size limit are rejected."""
        monkeypatch.setenv("MAX_FILE_SIZE_MB", "1")
        config.settings = config.Settings()

        big = SelectedFile(name="poster.tif", content=b"0" * (1024 * 1024 + 1), content_type="image/tiff")
        with pytest.raises(ValidationException) as exc_info:
            file_service.validate_file(big)
        assert "exceeds maximum allowed size of 1MB" in str(exc_info.value)

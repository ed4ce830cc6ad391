"""
File Service for selection validation.
Checks file types and sizes before a selection enters the upload pipeline.
"""
import math
import os
from typing import List, Sequence
from design_intake.models.file_entry import SelectedFile
from design_intake.core import config
from design_intake.core.exceptions import ValidationException


def format_size(size: int) -> str:
    """Render a byte count for display, e.g. '1.5 MB'."""
    if size == 0:
        return "0 Bytes"
    k = 1024
    units = ['Bytes', 'KB', 'MB', 'GB']
    i = min(int(math.floor(math.log(size) / math.log(k))), len(units) - 1)
    value = round(size / math.pow(k, i), 2)
    return f"{value:g} {units[i]}"


class FileValidationService:
    """Service for validating user file selections."""

    ACCEPTED_EXTENSIONS = {
        '.pdf', '.png', '.jpeg', '.jpg', '.ai', '.psd', '.tif', '.cdr', '.eps',
        '.gif', '.doc', '.docx', '.bmp', '.webp', '.webm', '.m4a', '.mp3',
        '.wav', '.ogg'
    }

    def validate_selection(self, files: Sequence[SelectedFile]) -> None:
        """
        Validate every file of a selection.

        A single invalid file rejects the whole selection.

        Args:
            files: Files picked or dropped by the user

        Raises:
            ValidationException: If the selection is empty or any file is invalid
        """
        if not files:
            raise ValidationException("No files selected")

        errors: List[str] = []
        for file in files:
            try:
                self.validate_file(file)
            except ValidationException as e:
                errors.append(e.message)

        if errors:
            raise ValidationException("; ".join(errors))

    def validate_file(self, file: SelectedFile) -> None:
        """
        Validate one file's name, type and size.

        Raises:
            ValidationException: If the file is not acceptable
        """
        if not file.name or not file.name.strip():
            raise ValidationException("File name cannot be empty")

        extension = os.path.splitext(file.name)[1].lower()
        if extension not in self.ACCEPTED_EXTENSIONS:
            raise ValidationException(f"File type not allowed: {file.name}")

        if file.size == 0:
            raise ValidationException(f"File is empty: {file.name}")

        max_size_bytes = config.settings.max_file_size_mb * 1024 * 1024
        if file.size > max_size_bytes:
            raise ValidationException(
                f"File size of {file.name} ({format_size(file.size)}) exceeds maximum allowed size of "
                f"{config.settings.max_file_size_mb}MB"
            )

from unittest.mock import MagicMock, patch

import pytest

from core.models.errors import ValidationError
from core.models.image import DeletionResult
from handlers.upload_cover.service import CoverUploadService


class TestCoverUploadService:
    def test_upload_without_previous_cover(
        self, processor, make_candidate, jpeg_bytes
    ) -> None:
        outcome = CoverUploadService(processor).upload_cover(
            owner_id="42", candidate=make_candidate(jpeg_bytes)
        )

        assert outcome.cover.public_path == "/uploads/books/cover_42_1700000000000.webp"
        assert outcome.cleanup == []

    def test_previous_cover_cleaned_after_processing(
        self, processor, memory_storage, make_candidate, jpeg_bytes
    ) -> None:
        new_cover = "uploads/books/cover_42_1700000000000.webp"
        seen: list[bool] = []

        def cleanup_cover(path: str) -> list[DeletionResult]:
            seen.append(new_cover in memory_storage)
            return [DeletionResult(path=path, success=True)]

        with patch.object(processor, "cleanup_cover", side_effect=cleanup_cover) as spy:
            CoverUploadService(processor).upload_cover(
                owner_id="42",
                candidate=make_candidate(jpeg_bytes),
                previous_cover="/uploads/books/cover_42_1.webp",
            )

        spy.assert_called_once_with("/uploads/books/cover_42_1.webp")
        assert seen == [True]

    def test_failed_upload_keeps_previous_cover(self, make_candidate) -> None:
        processor = MagicMock()
        processor.process_cover.side_effect = ValidationError(errors=["File must be an image"])

        with pytest.raises(ValidationError):
            CoverUploadService(processor).upload_cover(
                owner_id="42",
                candidate=make_candidate(b"x", filename="a.txt", mime_type="text/plain"),
                previous_cover="/uploads/books/cover_42_1.webp",
            )

        processor.cleanup_cover.assert_not_called()

    def test_cleanup_failures_are_reported(
        self, processor, make_candidate, jpeg_bytes
    ) -> None:
        outcome = CoverUploadService(processor).upload_cover(
            owner_id="42",
            candidate=make_candidate(jpeg_bytes),
            previous_cover="/uploads/books/cover_42_1.webp",
        )

        assert len(outcome.cleanup) == 5
        assert not any(result.success for result in outcome.cleanup)

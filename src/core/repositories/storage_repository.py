"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod

from core.models.image import FileStat


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image files.

    Keys are relative paths under the public root, e.g.
    ``uploads/books/cover_42_1700000000000.webp``.
    Implementations could be local disk, memory, etc.
    The pipeline depends on this interface, not the implementation.
    """

    @abstractmethod
    def save_image(self, *, key: str, file_data: bytes) -> str:
        """Store image bytes, creating parent folders as needed.

        Args:
            key: Relative storage key
            file_data: Encoded image content

        Returns:
            The key the data was stored under

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    def load_image(self, *, key: str) -> bytes:
        """Read stored image bytes.

        Raises:
            FileNotFoundError: If nothing is stored under the key
            StorageError: If the read fails
        """

    @abstractmethod
    def remove_image(self, *, key: str) -> None:
        """Delete a stored image.

        Raises:
            FileNotFoundError: If nothing is stored under the key
            StorageError: If deletion fails
        """

    @abstractmethod
    def stat_image(self, *, key: str) -> FileStat:
        """Return size and timestamps of a stored image.

        Raises:
            FileNotFoundError: If nothing is stored under the key
            StorageError: If the lookup fails
        """

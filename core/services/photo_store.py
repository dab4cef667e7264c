# =============================================================================
# core/services/photo_store.py - Local Photo Storage
# =============================================================================
# Handles writing and removing shirt photos in the uploads directory.
#
# File names are generated as "<epoch millis>-<random>.<original ext>" so
# concurrent uploads never collide in practice; a name that already exists
# is never overwritten. The HTTP layer turns a stored name into an absolute
# URL under UPLOADS_URL_PATH, and that URL is what records keep as photoRef.
# =============================================================================

import logging
import random
import time
from pathlib import Path, PurePosixPath

from app.exceptions import PhotoStorageError

logger = logging.getLogger(__name__)

# Attempts at finding a free name before giving up
MAX_NAME_ATTEMPTS = 5


class PhotoStore:
    """
    Filesystem-backed storage for uploaded photos.

    Example:
        store = PhotoStore(Path("./uploads"), url_path="/uploads")
        name = store.save(b"...", "front.png")   # "1718000000000-482913.png"
        url = store.build_url("http://localhost:8000/", name)
        store.owns(url)                           # True
        store.delete(store.name_from_ref(url))
    """

    def __init__(self, directory: Path, url_path: str = "/uploads"):
        self.directory = Path(directory)
        self.url_path = "/" + url_path.strip("/")

    def ensure_directory(self) -> None:
        """Create the uploads directory if it doesn't exist."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PhotoStorageError(str(self.directory), str(e)) from e

    @staticmethod
    def generate_name(original_name: str) -> str:
        """
        Build a fresh file name keeping the original extension.

        Example:
            generate_name("front.PNG")  # "1718000000000-482913071.PNG"
        """
        extension = PurePosixPath(original_name.replace("\\", "/")).suffix
        millis = int(time.time() * 1000)
        return f"{millis}-{random.randint(0, 10**9)}{extension}"

    def path_for(self, name: str) -> Path:
        """Resolve a stored name to its file path inside the uploads directory."""
        # Only the final component is honoured, so a name can't escape the directory
        return self.directory / PurePosixPath(name.replace("\\", "/")).name

    def exists(self, name: str) -> bool:
        """Check whether a stored photo is present."""
        return self.path_for(name).is_file()

    def save(self, content: bytes, original_name: str) -> str:
        """
        Write a photo under a newly generated name.

        Returns:
            The stored file name

        Raises:
            PhotoStorageError: If the file cannot be written
        """
        for _ in range(MAX_NAME_ATTEMPTS):
            name = self.generate_name(original_name)
            path = self.path_for(name)
            try:
                with open(path, "xb") as f:
                    f.write(content)
            except FileExistsError:
                logger.debug(f"Photo name already taken, retrying: {name}")
                continue
            except OSError as e:
                logger.error(f"Failed to write photo {name}: {e}")
                raise PhotoStorageError(name, str(e)) from e

            logger.info(f"Saved photo: {name} ({len(content)} bytes)")
            return name

        raise PhotoStorageError(original_name, "could not allocate a unique file name")

    def delete(self, name: str) -> bool:
        """
        Remove a stored photo.

        Returns:
            True if a file was removed, False if it was already absent

        Raises:
            PhotoStorageError: If the file exists but cannot be removed
        """
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug(f"Photo already absent: {name}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete photo {name}: {e}")
            raise PhotoStorageError(name, str(e)) from e

        logger.info(f"Deleted photo: {name}")
        return True

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def build_url(self, base_url: str, name: str) -> str:
        """
        Turn a stored name into the absolute URL kept on the record.

        Example:
            build_url("http://localhost:8000/", "1-2.png")
            # "http://localhost:8000/uploads/1-2.png"
        """
        return f"{base_url.rstrip('/')}{self.url_path}/{name}"

    def owns(self, photo_ref: str | None) -> bool:
        """Check whether a photo reference points into this store."""
        return bool(photo_ref) and f"{self.url_path}/" in photo_ref

    def name_from_ref(self, photo_ref: str | None) -> str | None:
        """
        Extract the stored file name from a reference.

        Returns None for empty references and for URLs owned by someone else.
        """
        if not self.owns(photo_ref):
            return None
        tail = photo_ref.rsplit(f"{self.url_path}/", 1)[-1]
        # Drop any query string or fragment a client may have appended
        tail = tail.split("?", 1)[0].split("#", 1)[0]
        name = PurePosixPath(tail).name
        return name or None

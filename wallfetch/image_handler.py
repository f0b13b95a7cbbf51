"""
Image Handler

Utilities for holding a fetched image and writing it to disk.

An ImageHandle is what a supplier hands back after a successful fetch. It owns the raw bytes (or a
stream that is read lazily) and knows, via Pillow, what format those bytes are in. A handle is
consumed exactly once, either by cache() or by save_to_format().

Caching: cache() is content addressed. The file name is the sha256 of the bytes plus an extension
derived from the image format, so fetching the same image twice lands on the same path and does not
write a second file.

Saving: save_to_format() writes to an explicit path and re-encodes with Pillow when the extension
asks for a different format than the one that was downloaded.

Both operations write to a temporary file next to the target and rename it into place, so a failed
write never leaves a partial image behind.
"""

import io
import os
import hashlib
import tempfile
from pathlib import Path
from typing import Optional, Union, BinaryIO

from PIL import Image, UnidentifiedImageError


class InvalidImageError(Exception):
    """
    Raised when provided binary input is not an image. Wrapper around the PIL
    UnidentifiedImageError for custom error messaging.
    """

    pass


class PersistenceFailed(Exception):
    """
    Raised when an image cannot be written to the cache or to an explicit path.
    """

    pass


class ImageConsumedError(PersistenceFailed):
    """
    Raised when an ImageHandle is persisted a second time.
    """

    pass


# Pillow format names that don't map nicely onto a file extension
FORMAT_EXTENSIONS = {"JPEG": "jpg", "TIFF": "tiff", "MPO": "jpg"}

# formats that can't store an alpha channel or a palette
RGB_ONLY_FORMATS = {"JPEG", "BMP", "PPM"}

# modes every other writable format accepts; anything else (CMYK, YCbCr, LAB...) is converted
PORTABLE_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}


def validate_image(input) -> str:
    """
    Determine whether input is a valid image and return the format name reported by Pillow.
    Input may be a path, raw bytes or a file object. Pillow only reads the header here, so this
    is cheap enough to use for validation.
    """

    if isinstance(input, (bytes, bytearray)):
        input = io.BytesIO(input)

    try:
        with Image.open(input) as image:
            if image.format is None:
                raise InvalidImageError(f"Input {str(input)} does not appear to be an image.")
            return image.format

    except UnidentifiedImageError:
        raise InvalidImageError(f"Input {str(input)} does not appear to be an image.")

    except FileNotFoundError:
        raise InvalidImageError(f"Input {str(input)} could not be found.")


def content_id(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def extension_for(format: str) -> str:
    return FORMAT_EXTENSIONS.get(format.upper(), format.lower())


def format_for(path: Path) -> str:
    """
    Infer the Pillow format name from the extension of path, e.g. '.jpg' -> 'JPEG'.
    """

    suffix = path.suffix.lower()
    if suffix == "":
        raise PersistenceFailed(
            f"Cannot tell which image format to use for {path}: no file extension."
        )

    format = Image.registered_extensions().get(suffix)
    if format is None:
        raise PersistenceFailed(f"Unsupported image format '{suffix}' for {path}.")

    return format


class ImageHandle:
    """
    Result of a successful fetch. Pass either the raw bytes as content or a readable binary
    stream, which is read the first time the bytes are needed. The format is detected from the
    bytes unless the supplier already knows it.
    """

    def __init__(
        self,
        content: Optional[bytes] = None,
        stream: Optional[BinaryIO] = None,
        format: Optional[str] = None,
        source: Optional[str] = None,
    ):
        if content is None and stream is None:
            raise ValueError("ImageHandle needs either content or a stream.")

        self._content = content
        self._stream = stream
        self._format = format.upper() if format else None
        self.source = source
        self.consumed = False

    @property
    def content(self) -> bytes:
        if self._content is None:
            try:
                self._content = self._stream.read()
            finally:
                self._stream.close()
            self._stream = None
        return self._content

    @property
    def format(self) -> str:
        if self._format is None:
            self._format = validate_image(self.content)
        return self._format

    def consume(self) -> bytes:
        """
        Hand out the bytes for persisting. A handle may only be persisted once.
        """

        if self.consumed:
            raise ImageConsumedError(
                f"Image from {self.source or 'unknown source'} was already saved."
            )
        self.consumed = True
        return self.content

    def __repr__(self) -> str:
        return f"ImageHandle(source={self.source!r}, format={self._format!r})"


def atomic_write(destination: Path, data: Union[bytes, Image.Image], format: str = None):
    """
    Write data to a temporary file in the destination directory, then rename it over destination.
    data is either raw bytes or a Pillow image that gets encoded as format.
    """

    destination.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".part"
    )

    try:
        with os.fdopen(fd, "wb") as tmp:
            if isinstance(data, Image.Image):
                data.save(tmp, format=format)
            else:
                tmp.write(data)
        os.replace(tmp_name, destination)

    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def convert_for(image: Image.Image, format: str) -> Image.Image:
    """
    Convert image to a mode that format can be written in. Returns image unchanged when no
    conversion is needed.
    """

    if format in RGB_ONLY_FORMATS:
        if image.mode in ("RGB", "L"):
            return image
        return image.convert("RGB")

    if image.mode in PORTABLE_MODES:
        return image

    return image.convert("RGBA" if "A" in image.getbands() else "RGB")


def cache(image: ImageHandle, cache_dir: Union[str, Path]) -> Path:
    """
    Store image under cache_dir using its content hash as the file name and return the path.
    Caching identical bytes again returns the existing file without writing.
    """

    cache_dir = Path(cache_dir).expanduser().resolve()

    try:
        data = image.consume()
        destination = cache_dir / f"{content_id(data)}.{extension_for(image.format)}"

    except InvalidImageError as error:
        raise PersistenceFailed(f"Cannot cache image: {error}")

    except OSError as error:
        raise PersistenceFailed(f"Failed to read image from {image.source or 'stream'}: {error}")

    if destination.is_file():
        return destination

    try:
        atomic_write(destination, data)

    except OSError as error:
        raise PersistenceFailed(f"Failed to write image to cache at {destination}: {error}")

    return destination


def save_to_format(image: ImageHandle, file_path: Union[str, Path]) -> Path:
    """
    Save image at file_path, overwriting any existing file. The target format comes from the file
    extension and the image is re-encoded if it was fetched in a different format. Returns the
    resolved path.
    """

    destination = Path(file_path).expanduser().resolve()

    # edge case where destination path is a folder
    if destination.is_dir():
        raise PersistenceFailed(f"Destination file {destination} is a directory.")

    target_format = format_for(destination)

    try:
        data = image.consume()

        if image.format == target_format:
            atomic_write(destination, data)
            return destination

        with Image.open(io.BytesIO(data)) as decoded:
            atomic_write(destination, convert_for(decoded, target_format), format=target_format)

    except InvalidImageError as error:
        raise PersistenceFailed(f"Cannot save image: {error}")

    except (OSError, ValueError) as error:
        raise PersistenceFailed(
            f"Failed to save image as {target_format} at {destination}: {error}"
        )

    return destination

"""
Directory Supplier

Pick a random image from a folder on disk, e.g. a collection of wallpapers you already have.

    {"type": "directory", "path": "~/Pictures/wallpapers", "recursive": true}

Tags match against file names: a file qualifies if its name contains any of the tags (case
insensitive). Aspect ratios, when given, must match the image's reduced width:height exactly.
"""

import asyncio
import random
from math import gcd
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from wallfetch.models import AspectRatio, SearchParameters
from wallfetch.image_handler import ImageHandle, validate_image, InvalidImageError
from wallfetch.suppliers import register_supplier
from wallfetch.suppliers.base import (
    Chooser,
    Supplier,
    SupplierNetworkError,
    NoResultsError,
    MalformedResponseError,
    require,
)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif", ".tif", ".tiff"}


def ratio_of(file: Path) -> Optional[AspectRatio]:
    """
    Reduced aspect ratio of the image at file, or None if it can't be read.
    """

    try:
        with Image.open(file) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError):
        return None

    divisor = gcd(width, height) or 1
    return AspectRatio(width // divisor, height // divisor)


def reduce(ratio: AspectRatio) -> AspectRatio:
    divisor = gcd(ratio.width, ratio.height) or 1
    return AspectRatio(ratio.width // divisor, ratio.height // divisor)


@register_supplier
class DirectorySupplier(Supplier):

    type = "directory"

    def __init__(
        self,
        name: str,
        path: Path,
        recursive: bool = False,
        chooser: Chooser = random.choice,
    ):
        super().__init__(name, chooser=chooser)
        self.path = Path(path).expanduser()
        self.recursive = recursive

    @classmethod
    def from_definition(cls, name: str, definition: dict, chooser: Chooser = random.choice):
        return cls(
            name,
            path=Path(require(definition, "path", str, name=name)),
            recursive=require(definition, "recursive", bool, default=False, name=name),
            chooser=chooser,
        )

    def candidates(self, params: SearchParameters) -> list[Path]:
        if not self.path.is_dir():
            raise SupplierNetworkError(f"Image folder {self.path} does not exist.")

        files = self.path.rglob("*") if self.recursive else self.path.iterdir()
        images = sorted(
            file for file in files if file.is_file() and file.suffix.lower() in IMAGE_SUFFIXES
        )

        tags = [tag.lower() for tag in params.tags]
        if tags:
            images = [file for file in images if any(tag in file.name.lower() for tag in tags)]

        if params.aspect_ratios:
            wanted = {reduce(ratio) for ratio in params.aspect_ratios}
            images = [file for file in images if ratio_of(file) in wanted]

        return images

    def fetch(self, params: SearchParameters) -> ImageHandle:
        images = self.candidates(params)

        if not images:
            raise NoResultsError(f"No images in {self.path} match this search.")

        file = self.chooser(images)

        try:
            content = file.read_bytes()
        except OSError as error:
            raise SupplierNetworkError(f"Failed to read {file}: {error}")

        try:
            format = validate_image(content)
        except InvalidImageError:
            raise MalformedResponseError(f"{file} does not appear to be an image.")

        return ImageHandle(content=content, format=format, source=str(file))

    async def fetch_one(self, params: SearchParameters) -> ImageHandle:
        return await asyncio.to_thread(self.fetch, params)

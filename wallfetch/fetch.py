"""
wallfetch fetch pipeline

FetchOrchestrator runs one fetch from start to finish:

    resolving category -> resolving supplier -> fetching -> persisting -> (applying) -> done

Any error moves the run to FAILED and is re-raised, except a wallpaper command that ran and failed:
the image is already saved at that point, so that failure is reported on the FetchResult instead.
Fetching is the only step that awaits; everything else runs synchronously.
"""

import random
from enum import Enum
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Optional
from collections.abc import Callable

from wallfetch import resolver
from wallfetch import image_handler
from wallfetch import wallpaper_handler
from wallfetch.config import WallfetchConfig
from wallfetch.models import Category, SupplierRef, SearchParameters, compose_parameters
from wallfetch.suppliers import load_supplier
from wallfetch.suppliers.base import Chooser, Supplier
from wallfetch.cli_utils.console import describe, confirm_success, status


class FetchState(Enum):
    RESOLVING_CATEGORY = "resolving category"
    RESOLVING_SUPPLIER = "resolving supplier"
    FETCHING = "fetching"
    PERSISTING = "persisting"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FetchRequest:
    """
    What the user asked for. category and supplier are names as typed; None means "no category"
    and "pick a supplier at random" respectively.
    """

    category: Optional[str] = None
    supplier: Optional[str] = None
    tags: tuple[str, ...] = ()
    output: Optional[Path] = None
    assign: bool = False


@dataclass
class FetchResult:
    path: Path
    supplier: SupplierRef
    parameters: SearchParameters
    category: Optional[Category] = None
    applied: bool = False
    apply_error: Optional[wallpaper_handler.ApplyCommandFailed] = None


@dataclass
class FetchOrchestrator:
    """
    Wire config, resolver, suppliers and persistence together for a single fetch. chooser picks
    the supplier when none is named (and is handed to the supplier for picking among results);
    loader builds a Supplier from a SupplierRef. Both are swapped out in tests.
    """

    config: WallfetchConfig
    chooser: Chooser = random.choice
    loader: Callable[..., Supplier] = load_supplier
    state: FetchState = FetchState.RESOLVING_CATEGORY
    history: list[FetchState] = field(default_factory=list)

    def transition(self, state: FetchState):
        self.state = state
        self.history.append(state)

    def resolve_category(self, name: Optional[str]) -> Optional[Category]:
        self.transition(FetchState.RESOLVING_CATEGORY)

        if name is None:
            return None

        return resolver.resolve(self.config.categories, name, kind="category")

    def resolve_supplier(self, name: Optional[str]) -> tuple[SupplierRef, Supplier]:
        self.transition(FetchState.RESOLVING_SUPPLIER)

        if not self.config.suppliers:
            raise resolver.NoCandidatesConfigured("supplier", name or "")

        if name is None:
            ref = self.chooser(self.config.suppliers)
        else:
            ref = resolver.resolve(self.config.suppliers, name, kind="supplier")

        return ref, self.loader(ref, self.config.WALLFETCH_CONFIG_DIR, chooser=self.chooser)

    async def fetch(self, supplier: Supplier, params: SearchParameters):
        self.transition(FetchState.FETCHING)

        with status(f"Downloading from {supplier.name}..."):
            image = await supplier.fetch_one(params)

        confirm_success(f":white_check_mark-emoji: Downloaded image from {supplier.name}")
        return image

    def persist(self, image: image_handler.ImageHandle, output: Optional[Path]) -> Path:
        self.transition(FetchState.PERSISTING)

        if output is not None:
            with status("Saving image to file..."):
                path = image_handler.save_to_format(image, output)
            confirm_success(
                f":floppy_disk-emoji: Successfully saved image to file: {path}"
            )
            return path

        path = image_handler.cache(image, self.config.WALLFETCH_CACHE_DIR)
        describe(f":floppy_disk-emoji: Cached image at {path}")
        return path

    def apply(self, path: Path) -> Optional[wallpaper_handler.ApplyCommandFailed]:
        self.transition(FetchState.APPLYING)

        try:
            wallpaper_handler.apply_wallpaper(self.config.set_command, path)

        except wallpaper_handler.ApplyCommandFailed as error:
            return error

        confirm_success(
            ":desktop_computer-emoji: Assigned to image as the active wallpaper."
        )
        return None

    async def run(self, request: FetchRequest) -> FetchResult:
        self.history = []

        try:
            category = self.resolve_category(request.category)
            if category is not None:
                describe(f":label-emoji: Using category '{category.name}'")

            params = compose_parameters(category, request.tags)

            ref, supplier = self.resolve_supplier(request.supplier)

            image = await self.fetch(supplier, params)
            path = self.persist(image, request.output)

            result = FetchResult(
                path=path, supplier=ref, parameters=params, category=category
            )

            if request.assign:
                result.apply_error = self.apply(path)
                result.applied = result.apply_error is None

        except Exception:
            self.transition(FetchState.FAILED)
            raise

        self.transition(FetchState.DONE)
        return result

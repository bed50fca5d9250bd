"""Bundled image asset lookup and decoding."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtGui import QImage, QImageReader

from .logger import get_logger

_logger = get_logger("loader")

ASSETS_DIR = Path(__file__).resolve().parent / "assets"


class AssetMissingError(FileNotFoundError):
    """The named image asset could not be found or decoded."""


def _supported_suffixes() -> list[str]:
    return ["." + bytes(fmt.data()).decode("ascii").lower() for fmt in QImageReader.supportedImageFormats()]


def resolve_asset(name: str, assets_dir: Path | None = None) -> Path:
    """Find `name` in the assets directory.

    `name` may carry an extension ("m4.png") or not ("m4"), in which case the
    first file with a Qt-readable extension wins.
    """
    base = Path(assets_dir) if assets_dir is not None else ASSETS_DIR
    direct = base / name
    if direct.suffix and direct.is_file():
        return direct

    for suffix in _supported_suffixes():
        candidate = base / f"{name}{suffix}"
        if candidate.is_file():
            return candidate

    raise AssetMissingError(f"Image asset {name!r} not found in {base}")


def load_image(path: str | Path) -> QImage:
    """Decode an image file, raising AssetMissingError if it is absent or unreadable."""
    p = Path(path)
    if not p.is_file():
        _logger.error("image file not found: %s", p)
        raise AssetMissingError(f"Image file not found: {p}")

    reader = QImageReader(str(p))
    reader.setAutoTransform(True)
    image = reader.read()
    if image.isNull():
        _logger.error("failed to decode %s: %s", p, reader.errorString())
        raise AssetMissingError(f"Could not decode image {p}: {reader.errorString()}")

    _logger.debug("loaded %s (%dx%d)", p, image.width(), image.height())
    return image


def load_asset(name: str, assets_dir: Path | None = None) -> QImage:
    """Resolve a bundled asset by name and decode it."""
    try:
        path = resolve_asset(name, assets_dir)
    except AssetMissingError:
        _logger.error("image asset missing: %s", name)
        raise
    return load_image(path)

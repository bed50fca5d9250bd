"""Crop package public API.

Expose the bitmap extraction helpers as `crop_image.crop`.

Important: keep this module lightweight.
Do NOT import dialog/workflow modules here.
If you need the interactive workflow, import it directly:
    - `from crop_image.crop.crop_operations import start_crop_workflow`
"""

from .crop import extract_crop, render_crop

__all__ = [
    "extract_crop",
    "render_crop",
]

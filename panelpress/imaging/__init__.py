"""Image transformation pipeline for e-reader pages."""

from .crop import CropRect, auto_crop
from .decode import decode
from .encode import encode, encode_page
from .models import ArchiveEntry, EncodedPage
from .pipeline import PagePipeline, PageResult, process
from .resize import resize_image
from .split import Split
from .spread import process_image_view, rotate_90, split_double_page
from .tone import transform

__all__ = [
    "ArchiveEntry",
    "CropRect",
    "EncodedPage",
    "PagePipeline",
    "PageResult",
    "Split",
    "auto_crop",
    "decode",
    "encode",
    "encode_page",
    "process",
    "process_image_view",
    "resize_image",
    "rotate_90",
    "split_double_page",
    "transform",
]

"""Image-level operations: orientation, decode, bounded resize, re-encode."""

from .orientation import (
    Orientation,
    apply_orientation,
    orientation_from_decoder,
    orientation_from_metadata,
    resolve_orientation,
)
from .processing import (
    ImageOptimizeOptions,
    clamp_quality,
    decode_image,
    encode_image,
    image_to_webp,
    image_to_webp_from_base64,
    image_to_webp_from_file,
    optimize_image,
    optimize_image_from_base64,
    optimize_image_from_file,
    resize_image,
    target_size,
)

__all__ = [
    "Orientation",
    "apply_orientation",
    "orientation_from_decoder",
    "orientation_from_metadata",
    "resolve_orientation",
    "ImageOptimizeOptions",
    "clamp_quality",
    "decode_image",
    "encode_image",
    "image_to_webp",
    "image_to_webp_from_base64",
    "image_to_webp_from_file",
    "optimize_image",
    "optimize_image_from_base64",
    "optimize_image_from_file",
    "resize_image",
    "target_size",
]

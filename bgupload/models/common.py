"""
Common domain types.

Shared value types used by job descriptors, states and transport metadata.

Dependencies: pydantic
System role: Shared model building blocks
"""

from enum import Enum

from pydantic import JsonValue

# JSON-compatible value: str, int, float, bool, None, or lists/dicts of them.
MetadataValue = JsonValue
MetadataBag = dict[str, JsonValue]


class ResourceKind(str, Enum):
    """
    Kind tag of one uploadable resource belonging to an asset.

    PHOTO / VIDEO / AUDIO: Primary payloads
    FULL_SIZE_*: Edited renditions
    ALTERNATE_PHOTO: Secondary capture (e.g. RAW alongside JPEG)
    PAIRED_VIDEO / FULL_SIZE_PAIRED_VIDEO: Motion component of a live photo
    ADJUSTMENT_DATA / ADJUSTMENT_BASE_PHOTO: Edit recipe and its base image
    PHOTO_PROXY: Low resolution stand-in
    """

    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    ALTERNATE_PHOTO = "alternate_photo"
    FULL_SIZE_PHOTO = "full_size_photo"
    FULL_SIZE_VIDEO = "full_size_video"
    ADJUSTMENT_DATA = "adjustment_data"
    PAIRED_VIDEO = "paired_video"
    FULL_SIZE_PAIRED_VIDEO = "full_size_paired_video"
    ADJUSTMENT_BASE_PHOTO = "adjustment_base_photo"
    PHOTO_PROXY = "photo_proxy"

    @classmethod
    def parse(cls, value: str) -> "ResourceKind | None":
        """Return the kind for a tag, or None when the tag is unknown."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

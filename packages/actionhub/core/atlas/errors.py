"""Atlas packing errors.

Both errors are fatal for the pack call that raised them and propagate to
its caller.
"""

from __future__ import annotations

from actionhub.core.errors import ActionHubError


class AtlasError(ActionHubError):
    """Base exception for atlas packing."""


class PackingOverflowError(AtlasError):
    """A single frame cannot fit on any page under the configured limits.

    Attributes:
        frame_index: Original index of the offending frame
        width: Trimmed frame width
        height: Trimmed frame height
        max_size: Page size limit in effect
        padding: Padding in effect
    """

    def __init__(self, *, frame_index: int, width: int, height: int, max_size: int, padding: int):
        self.frame_index = frame_index
        self.width = width
        self.height = height
        self.max_size = max_size
        self.padding = padding
        super().__init__(
            f"Frame {frame_index} ({width}x{height}) does not fit a {max_size}px page "
            f"with {padding}px padding"
        )


class EncodeExhaustedError(AtlasError):
    """A page image could not be produced by any encode path.

    Attributes:
        width: Page canvas width
        height: Page canvas height
    """

    def __init__(self, *, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(
            f"PNG encoding failed for {width}x{height} page; "
            "try a smaller atlas max size or enable trimming"
        )

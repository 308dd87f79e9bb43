"""Split capture blocks of arbitrary length into fixed-size analysis frames.

No samples are carried between calls: a trailing remainder shorter than the
frame size is dropped, and a block shorter than one frame yields nothing.
"""

from typing import Iterator, List

import numpy as np


class FrameChunker:
    """Cuts raw PCM blocks into contiguous, non-overlapping frames of `frame_size`."""

    def __init__(self, frame_size: int):
        if frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {frame_size}")
        self.frame_size = frame_size

    def count(self, n_samples: int) -> int:
        """Number of whole frames a block of n_samples produces."""
        return n_samples // self.frame_size

    def frames(self, block: np.ndarray) -> Iterator[np.ndarray]:
        """Yield read-only frames lazily, so callers can stop early.

        Args:
            block: Mono samples, shape (n_samples,).

        Yields:
            float32 frames of shape (frame_size,), in block order.
        """
        block = np.asarray(block, dtype=np.float32).reshape(-1)
        n = self.count(len(block))
        if n == 0:
            return
        stacked = block[: n * self.frame_size].reshape(n, self.frame_size).copy()
        stacked.setflags(write=False)
        for frame in stacked:
            yield frame

    def split(self, block: np.ndarray) -> List[np.ndarray]:
        """Return every frame of the block (e.g. for a full spectrum history)."""
        return list(self.frames(block))

"""Scratch-file supervision for the file-bearing request flows."""

import logging
from types import TracebackType

from models.video import VideoAsset

logger = logging.getLogger(__name__)


class ScratchVideo:
    """Context manager that deletes an uploaded video exactly once.

    Wrap everything that happens after ingestion::

        with ScratchVideo(asset):
            suggestion = generator.generate(asset, reporter, date)

    The file is removed on every exit path. Exceptions raised inside the
    block propagate unchanged after the file is gone.
    """

    def __init__(self, asset: VideoAsset):
        self.asset = asset
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Delete the scratch file. Later calls do nothing."""
        if self._released:
            return
        self._released = True
        try:
            self.asset.path.unlink(missing_ok=True)
            logger.debug(f"[Cleanup] Removed scratch video {self.asset.path.name}")
        except OSError as e:
            logger.error(f"[Cleanup] Failed to remove scratch video {self.asset.path}: {e}")

    def __enter__(self) -> VideoAsset:
        return self.asset

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


def scratch_video(asset: VideoAsset) -> ScratchVideo:
    """Supervise ``asset`` for the duration of a ``with`` block."""
    return ScratchVideo(asset)

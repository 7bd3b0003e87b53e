"""
Webcam snapshots encoded for the telemetry channel.
"""
import base64
import logging
import threading
from typing import Optional

import cv2

from ...config import CAMERA_DEVICE
from ...errors import DeviceAccessError

logger = logging.getLogger("video_snapshot")

JPEG_QUALITY = 80
SNAPSHOT_WIDTH = 640


class WebcamSnapshotter:
    """Keeps the camera open and grabs a downscaled JPEG frame on demand."""

    def __init__(self, device: int = CAMERA_DEVICE, width: int = SNAPSHOT_WIDTH,
                 quality: int = JPEG_QUALITY):
        self.device = device
        self.width = width
        self.quality = quality
        self._cap: Optional[cv2.VideoCapture] = None
        self._lock = threading.Lock()

    @property
    def opened(self) -> bool:
        return self._cap is not None

    def open(self) -> None:
        """
        Raises:
            DeviceAccessError: camera missing or permission denied
        """
        with self._lock:
            if self._cap is not None:
                return
            cap = cv2.VideoCapture(self.device)
            if cap is None or not cap.isOpened():
                raise DeviceAccessError(f"Unable to open video source {self.device}")
            self._cap = cap
        logger.info(f"Camera {self.device} opened")

    def snapshot(self) -> Optional[str]:
        """Return one frame as base64 JPEG, or None when no frame could be read."""
        with self._lock:
            if self._cap is None:
                return None
            ret, frame = self._cap.read()
        if not ret or frame is None:
            logger.warning(f"Could not read frame from source {self.device}")
            return None

        height, width = frame.shape[:2]
        if width > self.width:
            scale = self.width / float(width)
            frame = cv2.resize(frame, (self.width, int(height * scale)))

        ok, encoded = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self.quality])
        if not ok:
            logger.warning("JPEG encoding failed")
            return None
        return base64.b64encode(encoded.tobytes()).decode("ascii")

    def close(self) -> None:
        with self._lock:
            cap, self._cap = self._cap, None
        if cap is not None:
            cap.release()
            logger.info(f"Camera {self.device} released")

from pathlib import Path
from typing import Iterator, Tuple

import numpy as np
import cv2 as cv


class MediaStream:
    """Handles media streaming tasks"""

    def __init__(self, video_path: Path) -> None:
        self.video_path: Path = Path(video_path)
        self.fps: float = 0.0
        self.width: int = 0
        self.height: int = 0
        self.frame_count: int = 0

    def open(self) -> cv.VideoCapture:
        """Opens the video and reads its properties."""
        if not self.video_path.exists():
            raise FileNotFoundError(f"Video not found: {self.video_path}")

        cap = cv.VideoCapture(str(self.video_path))
        if not cap.isOpened():
            raise RuntimeError(f"Unable to open video: {self.video_path}")

        self.fps = float(cap.get(cv.CAP_PROP_FPS)) or 30.0
        self.width = int(cap.get(cv.CAP_PROP_FRAME_WIDTH))
        self.height = int(cap.get(cv.CAP_PROP_FRAME_HEIGHT))
        self.frame_count = int(cap.get(cv.CAP_PROP_FRAME_COUNT))
        return cap

    def frames(self) -> Iterator[Tuple[int, np.ndarray]]:
        """Yields (timestamp_ms, RGB frame) one at a time, in order."""
        cap = self.open()
        try:
            idx = 0
            while True:
                ret, frame_bgr = cap.read()
                if not ret:
                    break
                timestamp_ms = int(round(idx * 1000.0 / self.fps))
                yield timestamp_ms, cv.cvtColor(frame_bgr, cv.COLOR_BGR2RGB)
                idx += 1
        finally:
            cap.release()

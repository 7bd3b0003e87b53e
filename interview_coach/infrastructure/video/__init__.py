"""Webcam frame capture for facial telemetry."""


# Lazy import so OpenCV is only loaded when video is enabled
def __getattr__(name):
    if name == "WebcamSnapshotter":
        from .snapshot import WebcamSnapshotter
        return WebcamSnapshotter
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = ["WebcamSnapshotter"]

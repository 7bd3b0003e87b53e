"""
Loading of native media libraries (PortAudio, OpenCV, gRPC) without console noise.
"""
import os
import sys
import warnings
import importlib

# Keep native stacks from spawning servers or printing banners on import
for _name, _value in (("JACK_NO_START_SERVER", "1"),
                      ("GRPC_VERBOSITY", "ERROR"),
                      ("GLOG_minloglevel", "2"),
                      ("OPENCV_LOG_LEVEL", "ERROR")):
    os.environ.setdefault(_name, _value)


def import_quietly(module_name: str):
    """
    Import `module_name` with Python warnings and sys.stderr silenced.

    Raises:
        ImportError: If the module is not installed
    """
    saved = sys.stderr
    try:
        with warnings.catch_warnings(), open(os.devnull, 'w') as devnull:
            warnings.simplefilter("ignore")
            sys.stderr = devnull
            return importlib.import_module(module_name)
    finally:
        sys.stderr = saved


def with_suppressed_audio_warnings(func):
    """
    Decorator silencing file descriptor 2 for the duration of the call.

    PortAudio/ALSA print device probing chatter straight to fd 2, which
    redirecting sys.stderr does not catch.
    """
    def wrapper(*args, **kwargs):
        try:
            saved_fd = os.dup(2)
            null_fd = os.open(os.devnull, os.O_WRONLY)
            os.dup2(null_fd, 2)
            os.close(null_fd)
        except OSError:
            saved_fd = None

        try:
            return func(*args, **kwargs)
        finally:
            if saved_fd is not None:
                os.dup2(saved_fd, 2)
                os.close(saved_fd)

    wrapper.__name__ = getattr(func, "__name__", "wrapper")
    wrapper.__doc__ = getattr(func, "__doc__", None)
    return wrapper

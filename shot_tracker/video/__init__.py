from .loader import CapturedFrame, VideoLoader

__all__ = ["CapturedFrame", "VideoLoader"]

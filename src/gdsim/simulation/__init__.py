from .replay import ReplayHarness

__all__ = ["ReplayHarness"]

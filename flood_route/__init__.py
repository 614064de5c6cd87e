"""Greedy best-first route finding and vehicle playback on a flood map."""

__version__ = "0.1.0"

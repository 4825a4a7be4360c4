"""Prompt-to-media web app backed by RunwayML."""

__version__ = "0.1.0"

"""
Client wrappers for the external generation services.

Includes:
- RunwayML: text-to-image, image-to-video and text-to-video tasks.
"""

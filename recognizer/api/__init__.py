"""
API layer for the recognizer.

Exposes HTTP endpoints under /v1 (recognize a frame grabbed from a video source).
"""

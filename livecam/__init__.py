"""livecam: redirect to the newest recorded camera clip in object storage."""

__version__ = "1.0.0"

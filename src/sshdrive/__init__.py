"""SSH Drive - client-side state for remote filesystems mounted as drive letters."""

__version__ = "0.1.0"

"""accessdesk: accessibility compliance dashboard engines."""

__version__ = "0.1.0"

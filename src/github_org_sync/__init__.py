"""GitHub Org Sync - snapshot an organization's GitHub activity into a local store."""

__version__ = "0.1.0"

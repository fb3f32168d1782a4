"""PMFlow - WBS hierarchy and project phase sequencing."""

__version__ = "0.1.0"

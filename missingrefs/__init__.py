"""missingrefs: find missing parts and dangling references in content hierarchies."""

__version__ = "0.1.0"

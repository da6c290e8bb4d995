"""Style checking core for SQL documents."""

__version__ = "0.1.0"

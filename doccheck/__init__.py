"""docs-check: documentation coverage and external link resolution."""

__version__ = "0.1.0"

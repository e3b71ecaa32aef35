"""gitscope - repository history browsing, diff, blame and full-history search."""

__version__ = "0.1.0"

"""Find, verify and extract prebuilt release binaries from GitHub releases and direct URLs."""

__version__ = "2.0.0rc0"
"""Expand project descriptors embedded in C# sources into git-tracked projects."""

__version__ = "0.1.0"

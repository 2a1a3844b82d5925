"""Descriptor discovery and normalization."""

from __future__ import annotations

from .extractor import descriptor_text, extract, iter_descriptor_comments
from .normalizer import EMPTY_DESCRIPTOR, DescriptorNormalizer

__all__ = [
    "DescriptorNormalizer",
    "EMPTY_DESCRIPTOR",
    "descriptor_text",
    "extract",
    "iter_descriptor_comments",
]

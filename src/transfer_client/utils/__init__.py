"""Utility modules for Transfer Client."""

from .sanitizer import (
    mask_sensitive_data,
    mask_url,
    mask_headers,
    mask_header_lines,
    mask_options,
    add_sensitive_keys,
)

__all__ = [
    'mask_sensitive_data',
    'mask_url',
    'mask_headers',
    'mask_header_lines',
    'mask_options',
    'add_sensitive_keys',
]

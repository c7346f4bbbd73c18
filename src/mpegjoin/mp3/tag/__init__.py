"""ID3v2 tag transplanting.

Public API:
- read_id3v2_tag
"""

from .transplant import read_id3v2_tag

__all__ = ["read_id3v2_tag"]

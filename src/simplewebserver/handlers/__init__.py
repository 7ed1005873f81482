"""
Body handlers: turn a resolved file into response body bytes.
"""

from .renderer import ContentRenderer

__all__ = ["ContentRenderer"]

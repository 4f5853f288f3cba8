"""
Export functions for laid-out process models.

Provides export of a model's diagram interchange to:
- SVG: Scalable Vector Graphics for quick visual inspection
"""

from .svg import to_svg

__all__ = ["to_svg"]

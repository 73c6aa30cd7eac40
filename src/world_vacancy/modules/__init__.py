"""
Modules package for world-vacancy.

Modules are plug-ins that add behavior on top of the server's zones.
"""

from world_vacancy.modules.base import ZoneModule

__all__ = ["ZoneModule"]

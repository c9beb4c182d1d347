"""Physics body shapes read from a JSON rigid-body description."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from .utility import PhysicsBody, Size, Vec2

logger = logging.getLogger(__name__)


class BodyParseError(ValueError):
    """The body description is not valid JSON or none is loaded."""


class BodyParser:
    """Holds one parsed body document and builds physics bodies from it."""

    def __init__(self) -> None:
        self._doc: Optional[Any] = None

    def parse(self, data: Union[str, bytes]) -> None:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            self._doc = json.loads(data)
        except json.JSONDecodeError as exc:
            raise BodyParseError(f"invalid body description: {exc}") from exc

    def parse_file(self, path: Union[str, Path]) -> None:
        self.parse(Path(path).read_bytes())

    def clear_cache(self) -> None:
        self._doc = None

    def body_from_json(
        self, name: str, content_size: Size, anchor_point: Vec2
    ) -> Optional[PhysicsBody]:
        """Build the body called ``name``, scaled to the node's width.

        Returns None when no body of that name exists.
        """
        if self._doc is None:
            raise BodyParseError("no body description loaded")
        bodies = self._doc.get("rigidBodies") if isinstance(self._doc, dict) else None
        if not isinstance(bodies, list):
            return None
        for entry in bodies:
            if entry["name"] != name:
                continue
            if not isinstance(entry, dict):
                logger.warning("body: %s not found!", name)
                return None
            width = content_size.width
            offx = -anchor_point.x * content_size.width
            offy = -anchor_point.y * content_size.height
            origin = Vec2(float(entry["origin"]["x"]), float(entry["origin"]["y"]))
            polygons = [
                [
                    Vec2(offx + width * point["x"], offy + width * point["y"])
                    for point in reversed(polygon)
                ]
                for polygon in entry["polygons"]
            ]
            return PhysicsBody(polygons=polygons, origin=origin)
        return None
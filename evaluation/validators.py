"""Geometry validators for generated building floors.

These checks work on the exported JSON shape (see ``geometry.exporters``) so
they can be run on a saved layout as well as on a fresh one. Every function
returns human readable strings describing the issues it found; an empty list
means the floor passed.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Tuple

from Generate.constants import HEADER_DEDUP_TOLERANCE

log = logging.getLogger(__name__)


def _room_bounds(room: Dict) -> Tuple[float, float, float, float]:
    """Return room plan bounds as (x1, z1, x2, z2)."""
    x = float((room.get("position") or {}).get("x", 0))
    z = float((room.get("position") or {}).get("z", 0))
    w = float((room.get("size") or {}).get("width", 0))
    d = float((room.get("size") or {}).get("depth", 0))
    return x, z, x + w, z + d


def _top_level(rooms: List[Dict]) -> List[Dict]:
    # cell rooms sit inside their cell block by construction
    return [r for r in rooms if not r.get("parent")]


def check_bounds(rooms: List[Dict], max_width: float, max_depth: float) -> List[str]:
    """Check that rooms lie within the floor footprint.

    Args:
        rooms: List of room dictionaries.
        max_width: Floor extent along x.
        max_depth: Floor extent along z.

    Returns:
        List of issues describing boundary violations.
    """
    issues: List[str] = []
    for room in rooms:
        x1, z1, x2, z2 = _room_bounds(room)
        if x1 < 0 or z1 < 0 or x2 > max_width or z2 > max_depth:
            issues.append(
                f"Room {room.get('type', 'Unknown')} at ({x1}, {z1}) "
                f"exceeds bounds {max_width}x{max_depth}"
            )
    return issues


def check_overlaps(rooms: List[Dict], tol: float = 1e-6) -> List[str]:
    """Check for overlapping room footprints.

    Args:
        rooms: List of room dictionaries.
        tol: Tolerance to ignore touching rectangles due to rounding.

    Returns:
        List of issues describing overlaps.
    """
    issues: List[str] = []
    for i, r1 in enumerate(rooms):
        x1, z1, x2, z2 = _room_bounds(r1)
        for r2 in rooms[i + 1 :]:
            xa, za, xb, zb = _room_bounds(r2)
            if x1 < xb - tol and x2 > xa + tol and z1 < zb - tol and z2 > za + tol:
                issues.append(
                    f"Room {r1.get('type', 'Unknown')} overlaps with {r2.get('type', 'Unknown')}"
                )
    return issues


def check_floor_area(rooms: List[Dict], max_width: float, max_depth: float) -> List[str]:
    total = 0.0
    for room in rooms:
        x1, z1, x2, z2 = _room_bounds(room)
        total += max(0.0, x2 - x1) * max(0.0, z2 - z1)
    if total > max_width * max_depth:
        return [f"Room footprints cover {total:.0f} but the floor only has {max_width * max_depth:.0f}"]
    return []


def check_header_spacing(headers: List[Dict], tolerance: float = HEADER_DEDUP_TOLERANCE) -> List[str]:
    """No two placed door headers on a floor may sit within ``tolerance`` of each other."""
    issues: List[str] = []
    centres = [h.get("center") or {} for h in headers]
    for i, a in enumerate(centres):
        for b in centres[i + 1 :]:
            dist = math.sqrt(sum((float(a.get(k, 0)) - float(b.get(k, 0))) ** 2 for k in ("x", "y", "z")))
            if dist <= tolerance:
                issues.append(f"Door headers {dist:.2f} apart (tolerance {tolerance})")
    return issues


def validate_floor(floor: Dict, max_width: float, max_depth: float) -> List[str]:
    rooms = _top_level(floor.get("rooms", []))
    issues: List[str] = []
    issues.extend(check_bounds(rooms, max_width, max_depth))
    issues.extend(check_overlaps(rooms))
    issues.extend(check_floor_area(rooms, max_width, max_depth))
    issues.extend(check_header_spacing(floor.get("headers", [])))
    return [f"Floor {floor.get('index', '?')}: {msg}" for msg in issues]


def validate_building(data: Dict) -> List[str]:
    """Run every floor check over an exported building."""
    size = (data.get("building") or {}).get("size") or {}
    max_w = float(size.get("width", 0))
    max_d = float(size.get("depth", 0))
    issues: List[str] = []
    for floor in data.get("floors", []):
        issues.extend(validate_floor(floor, max_w, max_d))
    if issues:
        log.info("Validation found %d issues", len(issues))
    return issues

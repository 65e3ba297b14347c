from __future__ import annotations

from typing import Any, Dict, List

from geometry.kernel import Box, ExclusionZone, Header, Room, WallSegment


def _segment(seg: WallSegment) -> Dict[str, Any]:
    return {"start": seg.start, "end": seg.end, "gap": seg.is_gap}


def _box(box: Box) -> Dict[str, Any]:
    return {"name": box.name, "kind": box.kind, "center": box.center.as_dict(), "size": box.size.as_dict()}


def _header(h: Header) -> Dict[str, Any]:
    return {"wall": h.side.value, "span": _segment(h.span), "center": h.center.as_dict(), "size": h.size.as_dict()}


def _zone(z: ExclusionZone) -> Dict[str, Any]:
    return {"source": z.source, "x": z.rect.x, "z": z.rect.z, "width": z.rect.w, "depth": z.rect.d,
            "y_min": z.y_min, "y_max": z.y_max}


def room_to_dict(room: Room) -> Dict[str, Any]:
    return {
        "type": room.room_type,
        "position": {"x": room.position.x, "y": room.position.y, "z": room.position.z},
        "size": {"width": room.size.x, "height": room.size.y, "depth": room.size.z},
        "parent": room.parent,
        "walls": {
            side.value: [_segment(s) for s in wall.segments]
            for side, wall in room.walls.items()
        },
    }


def building_to_dict(layout) -> Dict[str, Any]:
    """Convert a ``BuildingLayout`` into plain JSON-serialisable data."""
    floors: List[Dict[str, Any]] = []
    for f in layout.floors:
        headers = [_header(h) for r in f.carve_results for h in r.headers]
        openings = [_box(b) for r in f.carve_results for b in r.openings]
        zones = []
        for key, zl in f.exclusion_zones.items():
            for z in zl:
                entry = _zone(z)
                entry["room_index"] = key.room_index
                entry["room_type"] = key.room_type
                zones.append(entry)
        floors.append({
            "index": f.index,
            "door_height": f.door_height,
            "rooms": [room_to_dict(r) for r in f.rooms],
            "door_candidates": [
                {"room_index": idx, "wall": side.value, "x": c.x, "z": c.z}
                for (idx, side), cands in f.door_candidates.items()
                for c in cands
            ],
            "headers": headers,
            "door_openings": openings,
            "exclusion_zones": zones,
            "exterior_openings": {
                side.value: [
                    {"position": o.position, "vertical": o.vertical, "width": o.width, "height": o.height}
                    for o in ops
                ]
                for side, ops in f.exterior_openings.items()
            },
        })

    exterior: Dict[str, Any] = {}
    for floor_index, per_side in layout.exterior.items():
        exterior[str(floor_index)] = {
            side.value: {
                "solids": [_segment(s) for s in seg.solids],
                "gaps": [_segment(g) for g in seg.gaps],
                "pieces": [_box(b) for b in pieces],
            }
            for side, (seg, pieces) in per_side.items()
        }

    return {
        "building": {
            "id": layout.building_id,
            "origin": layout.origin.as_dict(),
            "size": {"width": layout.size.x, "height": layout.size.y, "depth": layout.size.z},
            "floor_height": layout.floor_height,
            "grid_step": layout.grid_step,
            "seed": layout.seed,
        },
        "floors": floors,
        "exterior": exterior,
    }

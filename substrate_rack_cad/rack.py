"""Create CAD models for the multi-slot substrate rack.

The slots run along X. Each substrate stands upright in its slot, with its faces
normal to X. The material left between adjacent slots forms the ribs.
"""

from collections.abc import Iterable
from pathlib import Path

import build123d as bd
import build123d_ease as bde
from build123d_ease import show
from loguru import logger

from substrate_rack_cad.cad_lib import OVERCUT, make_label_recess
from substrate_rack_cad.export import export_parts, find_build_dir
from substrate_rack_cad.slide import make_mock_slide
from substrate_rack_cad.specs import RackSpec


def resolve_filled_slots(
    spec: RackSpec,
    filled_slots: Iterable[int] | None = None,
) -> list[int]:
    """Get the sorted slot indices to fill. `None` means every slot."""
    if filled_slots is None:
        return list(range(spec.slot_count))

    slots = sorted(set(filled_slots))
    for slot_num in slots:
        if not 0 <= slot_num < spec.slot_count:
            msg = f"Slot {slot_num} is out of range for a {spec.slot_count}-slot rack."
            raise ValueError(msg)
    return slots


def slide_locations(
    spec: RackSpec,
    filled_slots: Iterable[int] | None = None,
) -> list[tuple[float, float, float]]:
    """Get the bottom-center location of the substrate in each filled slot."""
    slot_centers_x = spec.slot_centers_x
    return [
        (slot_centers_x[slot_num], 0, spec.base_thickness)
        for slot_num in resolve_filled_slots(spec, filled_slots)
    ]


def make_rack(spec: RackSpec) -> bd.Part:
    """Make the rack.

    Origin: Bottom center of the body.
    """
    substrate = spec.substrate

    p = bd.Part(None)

    # Make the body.
    p += bd.Box(
        spec.body_x,
        spec.body_y,
        spec.body_z,
        align=bde.align.ANCHOR_BOTTOM,
    )

    # Remove the slots.
    for slot_x in spec.slot_centers_x:
        p -= bd.Box(
            substrate.slot_width,
            substrate.slot_length,
            spec.rib_height + OVERCUT,
            align=bde.align.ANCHOR_BOTTOM,
        ).translate((slot_x, 0, spec.base_thickness))

    # Remove the finger cutout across the ribs. Stops short of the end walls.
    if spec.finger_cutout:
        p -= bd.Box(
            spec.slot_span_x,
            spec.finger_cutout_width,
            spec.finger_cutout_depth + OVERCUT,
            align=bde.align.ANCHOR_BOTTOM,
        ).translate((0, 0, spec.body_z - spec.finger_cutout_depth))

    # Remove drain slots through the base, under each slot.
    if spec.drain_slots:
        for slot_x in spec.slot_centers_x:
            p -= bd.Box(
                substrate.slot_width,
                substrate.slot_length * spec.drain_slot_length_ratio,
                spec.base_thickness + 2 * OVERCUT,
                align=bde.align.ANCHOR_BOTTOM,
            ).translate((slot_x, 0, -OVERCUT))

    # Add the handles. Each one reaches back into the end wall to fuse with it.
    if spec.handles:
        for x_sign in (1, -1):
            handle_center_x = (
                x_sign * (spec.body_x + spec.handle_length - spec.end_wall_thickness) / 2
            )
            p += bd.Box(
                spec.handle_length + spec.end_wall_thickness,
                spec.handle_width,
                spec.handle_thickness,
                align=(bd.Align.CENTER, bd.Align.CENTER, bd.Align.MAX),
            ).translate((handle_center_x, 0, spec.body_z))

            # Remove the grip hole.
            p -= bd.Cylinder(
                radius=spec.handle_hole_d / 2,
                height=spec.handle_thickness + 2 * OVERCUT,
            ).translate(
                (
                    x_sign * (spec.body_x / 2 + spec.handle_length / 2),
                    0,
                    spec.body_z - spec.handle_thickness / 2,
                ),
            )

    # Remove the label recess on the -Y side.
    if spec.label_recess:
        p -= make_label_recess(
            width=spec.body_x - 2 * spec.label_margin,
            height=spec.body_z - 2 * spec.label_margin,
            depth=spec.label_depth,
            face="-Y",
        ).translate((0, -spec.body_y / 2, spec.body_z / 2))

    assert isinstance(p, bd.Part), "Rack is not a Part"

    logger.info(f"Rack bounding box: {p.bounding_box()}")

    return p


def make_populated_rack(
    spec: RackSpec,
    filled_slots: Iterable[int] | None = None,
) -> bd.Part:
    """Make the rack with mock substrates in `filled_slots` (default: all)."""
    locations = slide_locations(spec, filled_slots)
    logger.info(f"Populating rack with {len(locations)} substrate(s).")

    p = bd.Part(None)
    p += make_rack(spec)

    slide = make_mock_slide(spec.substrate)
    for location in locations:
        p += slide.translate(location)

    return p


if __name__ == "__main__":
    parts = {
        "rack": show(make_rack(RackSpec())),
        "rack_populated": make_populated_rack(RackSpec(), filled_slots=[0, 2, 4]),
        "rack_3_slot_plain": make_rack(
            RackSpec(
                slot_count=3,
                handles=False,
                finger_cutout=False,
                label_recess=False,
                drain_slots=True,
            ),
        ),
    }

    export_parts(parts, find_build_dir(Path(__file__).stem))

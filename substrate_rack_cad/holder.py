"""Create CAD models for the single-substrate holder.

Same slot interface as the rack, with retention ribs that pinch the substrate so
it stays put when the holder is moved around.
"""

from pathlib import Path

import build123d as bd
import build123d_ease as bde
from build123d_ease import show
from loguru import logger

from substrate_rack_cad.cad_lib import OVERCUT, make_label_recess, make_retention_rib
from substrate_rack_cad.export import export_parts, find_build_dir
from substrate_rack_cad.slide import make_mock_slide
from substrate_rack_cad.specs import HolderSpec


def make_holder(spec: HolderSpec) -> bd.Part:
    """Make the single-substrate holder.

    Origin: Bottom center of the slot.
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

    # Add the feet, as an extension of the base.
    if spec.feet:
        p += bd.Box(
            spec.overall_x,
            spec.body_y,
            spec.base_thickness,
            align=bde.align.ANCHOR_BOTTOM,
        )

    # Remove the slot.
    p -= bd.Box(
        substrate.slot_width,
        substrate.slot_length,
        spec.slot_depth + OVERCUT,
        align=bde.align.ANCHOR_BOTTOM,
    ).translate((0, 0, spec.base_thickness))

    # Remove the lead-in pocket at the mouth of the slot.
    if spec.lead_in:
        p -= bd.Box(
            substrate.slot_width + 2 * spec.lead_in_extra,
            substrate.slot_length + 2 * spec.lead_in_extra,
            spec.lead_in_depth + OVERCUT,
            align=bde.align.ANCHOR_BOTTOM,
        ).translate((0, 0, spec.body_z - spec.lead_in_depth))

    # Add the retention ribs on the -X face of the slot.
    if spec.retention_ribs:
        for rib_y in spec.rib_centers_y:
            p += make_retention_rib(
                protrusion=spec.rib_protrusion,
                width=spec.retention_rib_width,
                height=spec.rib_height,
            ).translate((-substrate.slot_width / 2, rib_y, spec.base_thickness))

    # Remove the label recess on the +X face, above the feet.
    if spec.label_recess:
        p -= make_label_recess(
            width=spec.body_y - 2 * spec.label_margin,
            height=spec.slot_depth - 2 * spec.label_margin,
            depth=spec.label_depth,
            face="+X",
        ).translate((spec.body_x / 2, 0, spec.base_thickness + spec.slot_depth / 2))

    assert isinstance(p, bd.Part), "Holder is not a Part"

    logger.info(f"Holder bounding box: {p.bounding_box()}")

    return p


def make_populated_holder(spec: HolderSpec) -> bd.Part:
    """Make the holder with a mock substrate in the slot.

    The substrate is pushed against the +X face of the slot. The retention ribs
    overlap it by `retention_interference`.
    """
    p = bd.Part(None)
    p += make_holder(spec)

    slide_x = (spec.substrate.slot_width - spec.substrate.thickness) / 2
    p += make_mock_slide(spec.substrate).translate((slide_x, 0, spec.base_thickness))

    return p


if __name__ == "__main__":
    parts = {
        "holder": show(make_holder(HolderSpec())),
        "holder_populated": make_populated_holder(HolderSpec()),
        "holder_no_feet": make_holder(HolderSpec(feet=False)),
    }

    export_parts(parts, find_build_dir(Path(__file__).stem))

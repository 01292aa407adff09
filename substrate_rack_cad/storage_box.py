"""Create CAD models for the storage box base and its snap-on lid.

The lid is a cap whose skirt slides down over the outside of the box walls until
the underside of its top rests on the box rim. Cantilever latch arms in the skirt
snap into grooves in the box walls.
"""

from pathlib import Path

import build123d as bd
import build123d_ease as bde
from build123d_ease import show
from loguru import logger

from substrate_rack_cad.cad_lib import (
    OVERCUT,
    make_label_recess,
    make_latch_catch,
    make_latch_hook,
    make_latch_slits,
)
from substrate_rack_cad.export import export_parts, find_build_dir
from substrate_rack_cad.specs import BoxSpec


def make_box_base(spec: BoxSpec) -> bd.Part:
    """Make the open-top box that the racks sit in.

    Origin: Bottom center.
    """
    p = bd.Part(None)

    p += bd.Box(
        spec.outer_x,
        spec.outer_y,
        spec.outer_z,
        align=bde.align.ANCHOR_BOTTOM,
    )

    # Remove the cavity.
    p -= bd.Box(
        spec.cavity_x,
        spec.cavity_y,
        spec.cavity_z + OVERCUT,
        align=bde.align.ANCHOR_BOTTOM,
    ).translate((0, 0, spec.floor_thickness))

    # Remove the latch catches, lined up with the lid hooks when the lid is closed.
    if spec.latches:
        catch = make_latch_catch(
            width=spec.latch_width + 2 * spec.latch_clearance,
            depth=spec.latch_catch_depth,
            height=spec.latch_hook_height + 2 * spec.latch_clearance,
        )
        for x_sign in (1, -1):
            p -= catch.rotate(bd.Axis.Z, 90 - 90 * x_sign).translate(
                (
                    x_sign * spec.outer_x / 2,
                    0,
                    spec.lid_seat_z + spec.latch_hook_height / 2,
                ),
            )

    # Remove the label recess on the -Y side, below the lid skirt.
    if spec.label_recess:
        p -= make_label_recess(
            width=spec.outer_x - 2 * spec.label_margin,
            height=spec.box_label_height,
            depth=spec.label_depth,
            face="-Y",
        ).translate((0, -spec.outer_y / 2, spec.lid_seat_z / 2))

    assert isinstance(p, bd.Part), "Box base is not a Part"

    logger.info(f"Box base bounding box: {p.bounding_box()}")

    return p


def make_box_lid(spec: BoxSpec) -> bd.Part:
    """Make the lid, in its closed orientation.

    Origin: Bottom center of the skirt (the lid rim).
    """
    p = bd.Part(None)

    p += bd.Box(
        spec.lid_outer_x,
        spec.lid_outer_y,
        spec.lid_outer_z,
        align=bde.align.ANCHOR_BOTTOM,
    )

    # Remove the space for the box walls.
    p -= bd.Box(
        spec.lid_inner_x,
        spec.lid_inner_y,
        spec.lid_skirt_height + OVERCUT,
        align=bde.align.ANCHOR_BOTTOM,
    ).translate((0, 0, -OVERCUT))

    # Cut the latch arms free and add a hook to the tip of each.
    if spec.latches:
        slits = make_latch_slits(
            arm_width=spec.latch_width,
            arm_length=spec.latch_arm_length,
            slit_width=spec.latch_slit_width,
            wall_thickness=spec.latch_arm_thickness,
        )
        hook = make_latch_hook(
            width=spec.latch_width,
            protrusion=spec.latch_hook_protrusion,
            height=spec.latch_hook_height,
        )
        for x_sign in (1, -1):
            rotate_angle = 90 - 90 * x_sign  # 0 for +X, 180 for -X.

            p -= slits.rotate(bd.Axis.Z, rotate_angle).translate(
                (x_sign * (spec.lid_inner_x + spec.latch_arm_thickness) / 2, 0, 0),
            )
            p += hook.rotate(bd.Axis.Z, rotate_angle).translate(
                (x_sign * spec.lid_inner_x / 2, 0, 0),
            )

    # Remove the label recess on top.
    if spec.label_recess:
        p -= make_label_recess(
            width=spec.lid_outer_x - 2 * spec.label_margin,
            height=spec.lid_outer_y - 2 * spec.label_margin,
            depth=spec.label_depth,
            face="+Z",
        ).translate((0, 0, spec.lid_outer_z))

    assert isinstance(p, bd.Part), "Box lid is not a Part"

    logger.info(f"Box lid bounding box: {p.bounding_box()}")

    return p


if __name__ == "__main__":
    parts = {
        "box_base": show(make_box_base(BoxSpec())),
        "box_lid": make_box_lid(BoxSpec()),
        "box_base_single_rack": make_box_base(BoxSpec(rack_count=1)),
    }

    export_parts(parts, find_build_dir(Path(__file__).stem))

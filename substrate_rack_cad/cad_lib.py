"""CAD library functions for features shared between the parts."""

from typing import Literal

import build123d as bd

# Extra length on cutting tools, so that they never leave a zero-thickness skin.
OVERCUT = 1.0

FaceName = Literal["+X", "-X", "+Y", "-Y", "+Z"]


def make_label_recess(
    *,
    width: float,
    height: float,
    depth: float,
    face: FaceName,
) -> bd.Part:
    """Make a cutting tool for a shallow rectangular label recess.

    * Origin: Center of the label, on the surface of the face being recessed.
    * `face` is the direction the face points. The recess goes `depth` into the
        part (against `face`), and sticks out by `OVERCUT` in front of it.
    * For side faces, `width` is horizontal and `height` is along Z. For the top
        face (`+Z`), `width` is along X and `height` is along Y.

    Args:
    ----
        width: Width of the label.
        height: Height of the label.
        depth: Depth of the recess into the face.
        face: Which way the recessed face points.

    """
    tool_depth = depth + OVERCUT

    if face == "+Z":
        size = (width, height, tool_depth)
        align = (bd.Align.CENTER, bd.Align.CENTER, bd.Align.MAX)
        shift = (0, 0, OVERCUT)
    elif face in ("+Y", "-Y"):
        size = (width, tool_depth, height)
        align = (
            bd.Align.CENTER,
            bd.Align.MAX if face == "+Y" else bd.Align.MIN,
            bd.Align.CENTER,
        )
        shift = (0, OVERCUT if face == "+Y" else -OVERCUT, 0)
    elif face in ("+X", "-X"):
        size = (tool_depth, width, height)
        align = (
            bd.Align.MAX if face == "+X" else bd.Align.MIN,
            bd.Align.CENTER,
            bd.Align.CENTER,
        )
        shift = (OVERCUT if face == "+X" else -OVERCUT, 0, 0)
    else:
        msg = f"Unsupported label face: {face}"
        raise ValueError(msg)

    return bd.Box(*size, align=align).translate(shift)


def make_retention_rib(
    *,
    protrusion: float,
    width: float,
    height: float,
    overlap: float = 0.5,
) -> bd.Part:
    """Make a retention rib that sticks out of a slot face to pinch a substrate.

    * Origin: On the slot face, at the bottom center of the rib.
    * The rib sticks out in +X by `protrusion`, and extends `overlap` into the wall
        behind the face (-X) so that it fuses to the wall.
    """
    return bd.Box(
        protrusion + overlap,
        width,
        height,
        align=(bd.Align.MIN, bd.Align.CENTER, bd.Align.MIN),
    ).translate((-overlap, 0, 0))


def make_latch_slits(
    *,
    arm_width: float,
    arm_length: float,
    slit_width: float,
    wall_thickness: float,
) -> bd.Part:
    """Make a cutting tool for the two slits that free a cantilever latch arm.

    * Origin: Center of the wall (in X), at the bottom edge of the skirt.
    * The slits run up from the bottom edge in +Z for `arm_length`, on either side
        of the arm (in Y).
    """
    p = bd.Part()

    for y_sign in (1, -1):
        p += bd.Box(
            wall_thickness + 2 * OVERCUT,
            slit_width,
            arm_length + OVERCUT,
            align=(bd.Align.CENTER, bd.Align.CENTER, bd.Align.MIN),
        ).translate(
            (
                0,
                y_sign * (arm_width + slit_width) / 2,
                -OVERCUT,
            ),
        )

    return p


def make_latch_hook(
    *,
    width: float,
    protrusion: float,
    height: float,
    overlap: float = 0.5,
) -> bd.Part:
    """Make the hook at the tip of a latch arm.

    * Origin: On the inner face of the arm, at the bottom edge of the skirt.
    * The arm is in +X. The hook sticks out towards -X by `protrusion`.
    """
    return bd.Box(
        protrusion + overlap,
        width,
        height,
        align=(bd.Align.MIN, bd.Align.CENTER, bd.Align.MIN),
    ).translate((-protrusion, 0, 0))


def make_latch_catch(
    *,
    width: float,
    depth: float,
    height: float,
) -> bd.Part:
    """Make a cutting tool for the groove that a latch hook snaps into.

    * Origin: On the outer face of the wall, at the center of the groove.
    * The wall is in -X. The groove goes `depth` into it.
    """
    return bd.Box(
        depth + OVERCUT,
        width,
        height,
        align=(bd.Align.MAX, bd.Align.CENTER, bd.Align.CENTER),
    ).translate((OVERCUT, 0, 0))

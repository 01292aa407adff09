"""Mock substrate, for populating the racks and holder in renders."""

import build123d as bd
import build123d_ease as bde

from substrate_rack_cad.specs import SubstrateSpec


def make_mock_slide(substrate: SubstrateSpec) -> bd.Part:
    """Make a mock substrate, standing upright as it sits in a slot.

    * Thickness is along X. `size_x` is along Y. `size_y` is along Z.
    * Origin: Bottom center.
    """
    p = bd.Part(None)

    p += bd.Box(
        substrate.thickness,
        substrate.size_x,
        substrate.size_y,
        align=bde.align.ANCHOR_BOTTOM,
    )

    return p

"""Assemble the box, lid, racks, and holder, populated with mock substrates."""

from collections.abc import Callable, Iterable
from pathlib import Path

import build123d as bd
from build123d_ease import show
from loguru import logger

from substrate_rack_cad.export import export_parts, find_build_dir
from substrate_rack_cad.holder import make_holder, make_populated_holder
from substrate_rack_cad.rack import make_rack, slide_locations
from substrate_rack_cad.slide import make_mock_slide
from substrate_rack_cad.specs import Design, default_design
from substrate_rack_cad.storage_box import make_box_base, make_box_lid

# Space between the box and the holder, in the assembly.
HOLDER_GAP_X = 10.0


def _labelled(part: bd.Part, label: str) -> bd.Part:
    part.label = label
    return part


def make_assembly(
    design: Design,
    *,
    lid_lift: float = 0,
    filled_slots: Iterable[int] | None = None,
) -> bd.Compound:
    """Make the full assembly.

    * The racks sit on the box floor, with substrates in `filled_slots` (default:
        all slots) of every rack.
    * The lid is closed, or raised by `lid_lift` to show the contents.
    * The populated holder sits next to the box, in +X.
    * Origin: Bottom center of the box.
    """
    box = design.box
    rack_spec = design.rack

    children: list[bd.Part] = [
        _labelled(make_box_base(box), "box_base"),
        _labelled(
            make_box_lid(box).translate((0, 0, box.lid_seat_z + lid_lift)),
            "box_lid",
        ),
    ]

    rack = make_rack(rack_spec)
    slide = make_mock_slide(design.substrate)
    locations = slide_locations(rack_spec, filled_slots)

    for rack_num, rack_y in enumerate(box.rack_centers_y):
        children.append(
            _labelled(
                rack.translate((0, rack_y, box.floor_thickness)),
                f"rack_{rack_num}",
            ),
        )
        for slide_num, (slide_x, slide_y, slide_z) in enumerate(locations):
            children.append(
                _labelled(
                    slide.translate(
                        (slide_x, rack_y + slide_y, box.floor_thickness + slide_z),
                    ),
                    f"rack_{rack_num}_slide_{slide_num}",
                ),
            )

    holder_x = box.outer_x / 2 + HOLDER_GAP_X + design.holder.overall_x / 2
    children.append(
        _labelled(
            make_populated_holder(design.holder).translate((holder_x, 0, 0)),
            "holder",
        ),
    )

    logger.info(f"Assembly has {len(children)} part(s).")

    return bd.Compound(label="assembly", children=children)


PART_MAKERS: dict[str, Callable[[Design], bd.Shape]] = {
    "rack": lambda design: make_rack(design.rack),
    "holder": lambda design: make_holder(design.holder),
    "box_base": lambda design: make_box_base(design.box),
    "box_lid": lambda design: make_box_lid(design.box),
    "mock_slide": lambda design: make_mock_slide(design.substrate),
    "assembly": make_assembly,
}


def make_all_parts(
    design: Design,
    names: Iterable[str] | None = None,
) -> dict[str, bd.Shape]:
    """Make the exportable parts in `names` (default: all), keyed by name."""
    names = list(PART_MAKERS) if names is None else list(names)

    unknown = [name for name in names if name not in PART_MAKERS]
    if unknown:
        msg = f"Unknown part(s): {unknown}. Choose from {list(PART_MAKERS)}."
        raise ValueError(msg)

    return {name: PART_MAKERS[name](design) for name in names}


if __name__ == "__main__":
    design = default_design()
    parts = {
        "assembly_open": show(make_assembly(design, lid_lift=40)),
        "assembly_closed": make_assembly(design),
    }

    export_parts(parts, find_build_dir(Path(__file__).stem))

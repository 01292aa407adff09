import build123d as bd
import pytest

from substrate_rack_cad.holder import make_holder, make_populated_holder
from substrate_rack_cad.rack import (
    make_populated_rack,
    make_rack,
    resolve_filled_slots,
    slide_locations,
)
from substrate_rack_cad.slide import make_mock_slide
from substrate_rack_cad.specs import BoxSpec, HolderSpec, RackSpec, SubstrateSpec
from substrate_rack_cad.storage_box import make_box_base, make_box_lid

PLAIN_RACK = {
    "finger_cutout": False,
    "handles": False,
    "label_recess": False,
    "drain_slots": False,
}
PLAIN_HOLDER = {
    "retention_ribs": False,
    "lead_in": False,
    "feet": False,
    "label_recess": False,
}
PLAIN_BOX = {"latches": False, "label_recess": False}


def _assert_size(part: bd.Shape, x: float, y: float, z: float) -> None:
    size = part.bounding_box().size
    assert size.X == pytest.approx(x, abs=1e-3)
    assert size.Y == pytest.approx(y, abs=1e-3)
    assert size.Z == pytest.approx(z, abs=1e-3)


def test_mock_slide_size():
    s = SubstrateSpec()
    slide = make_mock_slide(s)

    _assert_size(slide, s.thickness, s.size_x, s.size_y)
    assert slide.bounding_box().min.Z == pytest.approx(0, abs=1e-3)


def test_plain_rack_volume_is_body_minus_slots():
    spec = RackSpec(slot_count=4, **PLAIN_RACK)
    rack = make_rack(spec)

    slot_volume = (
        spec.substrate.slot_width * spec.substrate.slot_length * spec.rib_height
    )
    expected = spec.body_x * spec.body_y * spec.body_z - 4 * slot_volume
    assert rack.volume == pytest.approx(expected, rel=1e-6)


def test_single_slot_rack_volume():
    spec = RackSpec(slot_count=1, **PLAIN_RACK)
    rack = make_rack(spec)

    slot_volume = (
        spec.substrate.slot_width * spec.substrate.slot_length * spec.rib_height
    )
    expected = spec.body_x * spec.body_y * spec.body_z - slot_volume
    assert rack.volume == pytest.approx(expected, rel=1e-6)
    _assert_size(rack, spec.body_x, spec.body_y, spec.body_z)


def test_rack_envelope_includes_handles():
    spec = RackSpec(slot_count=5)
    rack = make_rack(spec)

    assert isinstance(rack, bd.Part)
    _assert_size(rack, spec.overall_x, spec.body_y, spec.body_z)


def test_rack_label_recess_volume():
    plain = make_rack(RackSpec(slot_count=3, **PLAIN_RACK))
    spec = RackSpec(slot_count=3, **{**PLAIN_RACK, "label_recess": True})
    labelled = make_rack(spec)

    recess = (
        (spec.body_x - 2 * spec.label_margin)
        * (spec.body_z - 2 * spec.label_margin)
        * spec.label_depth
    )
    assert plain.volume - labelled.volume == pytest.approx(recess, rel=1e-6)


@pytest.mark.parametrize("feature", ["finger_cutout", "drain_slots"])
def test_rack_cutouts_remove_material(feature):
    plain = make_rack(RackSpec(slot_count=3, **PLAIN_RACK))
    cut = make_rack(RackSpec(slot_count=3, **{**PLAIN_RACK, feature: True}))
    assert cut.volume < plain.volume


def test_populated_rack_adds_slides():
    spec = RackSpec(slot_count=3, **PLAIN_RACK)
    rack = make_rack(spec)
    populated = make_populated_rack(spec, filled_slots=[0, 2])

    slide_volume = make_mock_slide(spec.substrate).volume
    assert populated.volume == pytest.approx(rack.volume + 2 * slide_volume, rel=1e-6)
    # Substrates stick out above the ribs.
    assert populated.bounding_box().max.Z == pytest.approx(spec.slide_top_z, abs=1e-3)


def test_filled_slots_validation():
    spec = RackSpec(slot_count=3)
    assert resolve_filled_slots(spec) == [0, 1, 2]
    assert resolve_filled_slots(spec, [2, 0, 2]) == [0, 2]
    with pytest.raises(ValueError):
        resolve_filled_slots(spec, [3])
    with pytest.raises(ValueError):
        slide_locations(spec, [-1])


def test_slides_sit_in_slots():
    spec = RackSpec(slot_count=3)
    for (x, y, z), slot_x in zip(slide_locations(spec), spec.slot_centers_x):
        assert x == pytest.approx(slot_x)
        assert y == 0
        assert z == pytest.approx(spec.base_thickness)


def test_plain_holder_volume_is_body_minus_slot():
    spec = HolderSpec(**PLAIN_HOLDER)
    holder = make_holder(spec)

    slot_volume = (
        spec.substrate.slot_width * spec.substrate.slot_length * spec.slot_depth
    )
    expected = spec.body_x * spec.body_y * spec.body_z - slot_volume
    assert holder.volume == pytest.approx(expected, rel=1e-6)


def test_holder_envelope_includes_feet():
    spec = HolderSpec()
    holder = make_holder(spec)

    assert isinstance(holder, bd.Part)
    _assert_size(holder, spec.overall_x, spec.body_y, spec.body_z)


def test_holder_lead_in_pocket_volume():
    plain = make_holder(HolderSpec(**PLAIN_HOLDER))
    spec = HolderSpec(**{**PLAIN_HOLDER, "lead_in": True})
    pocketed = make_holder(spec)

    w = spec.substrate.slot_width
    length = spec.substrate.slot_length
    e = spec.lead_in_extra
    removed = ((w + 2 * e) * (length + 2 * e) - w * length) * spec.lead_in_depth
    assert plain.volume - pocketed.volume == pytest.approx(removed, rel=1e-6)


def test_holder_feet_volume():
    plain = make_holder(HolderSpec(**PLAIN_HOLDER))
    spec = HolderSpec(**{**PLAIN_HOLDER, "feet": True})
    footed = make_holder(spec)

    added = 2 * spec.foot_length * spec.body_y * spec.base_thickness
    assert footed.volume - plain.volume == pytest.approx(added, rel=1e-6)
    _assert_size(footed, spec.overall_x, spec.body_y, spec.body_z)


def test_holder_label_recess_volume():
    plain = make_holder(HolderSpec(**PLAIN_HOLDER))
    spec = HolderSpec(**{**PLAIN_HOLDER, "label_recess": True})
    labelled = make_holder(spec)

    recess = (
        (spec.body_y - 2 * spec.label_margin)
        * (spec.slot_depth - 2 * spec.label_margin)
        * spec.label_depth
    )
    assert plain.volume - labelled.volume == pytest.approx(recess, rel=1e-6)
    # Recess is on the +X face only.
    assert labelled.bounding_box().max.X == pytest.approx(spec.body_x / 2, abs=1e-3)


def test_holder_retention_ribs_add_material():
    plain = make_holder(HolderSpec(**PLAIN_HOLDER))
    spec = HolderSpec(**{**PLAIN_HOLDER, "retention_ribs": True})
    ribbed = make_holder(spec)

    rib_volume = spec.rib_protrusion * spec.retention_rib_width * spec.rib_height
    added = spec.retention_rib_count * rib_volume
    assert ribbed.volume - plain.volume == pytest.approx(added, rel=1e-6)


def test_populated_holder_is_taller_than_holder():
    spec = HolderSpec()
    populated = make_populated_holder(spec)
    assert populated.bounding_box().max.Z == pytest.approx(
        spec.base_thickness + spec.substrate.size_y,
        abs=1e-3,
    )


def test_plain_box_base_volume():
    spec = BoxSpec(rack_count=1, **PLAIN_BOX)
    base = make_box_base(spec)

    expected = (
        spec.outer_x * spec.outer_y * spec.outer_z
        - spec.cavity_x * spec.cavity_y * spec.cavity_z
    )
    assert base.volume == pytest.approx(expected, rel=1e-6)
    _assert_size(base, spec.outer_x, spec.outer_y, spec.outer_z)


def test_box_base_label_recess_volume():
    plain = make_box_base(BoxSpec(rack_count=1, **PLAIN_BOX))
    spec = BoxSpec(rack_count=1, latches=False, label_recess=True)
    labelled = make_box_base(spec)

    recess = (
        (spec.outer_x - 2 * spec.label_margin)
        * spec.box_label_height
        * spec.label_depth
    )
    assert plain.volume - labelled.volume == pytest.approx(recess, rel=1e-6)


def test_box_base_latch_catches_volume():
    plain = make_box_base(BoxSpec(rack_count=1, **PLAIN_BOX))
    spec = BoxSpec(rack_count=1, latches=True, label_recess=False)
    latched = make_box_base(spec)

    groove = (
        (spec.latch_width + 2 * spec.latch_clearance)
        * spec.latch_catch_depth
        * (spec.latch_hook_height + 2 * spec.latch_clearance)
    )
    assert plain.volume - latched.volume == pytest.approx(2 * groove, rel=1e-6)


def test_plain_lid_volume():
    spec = BoxSpec(rack_count=1, **PLAIN_BOX)
    lid = make_box_lid(spec)

    expected = (
        spec.lid_outer_x * spec.lid_outer_y * spec.lid_outer_z
        - spec.lid_inner_x * spec.lid_inner_y * spec.lid_skirt_height
    )
    assert lid.volume == pytest.approx(expected, rel=1e-6)
    _assert_size(lid, spec.lid_outer_x, spec.lid_outer_y, spec.lid_outer_z)


def test_lid_latches_volume():
    plain = make_box_lid(BoxSpec(rack_count=1, **PLAIN_BOX))
    spec = BoxSpec(rack_count=1, latches=True, label_recess=False)
    latched = make_box_lid(spec)

    slits = 4 * spec.latch_slit_width * spec.latch_arm_thickness * spec.latch_arm_length
    hooks = 2 * spec.latch_width * spec.latch_hook_protrusion * spec.latch_hook_height
    assert latched.volume == pytest.approx(plain.volume - slits + hooks, rel=1e-6)


def test_lid_label_recess_on_top():
    spec = BoxSpec(rack_count=1)
    lid = make_box_lid(spec)

    assert isinstance(lid, bd.Part)
    _assert_size(lid, spec.lid_outer_x, spec.lid_outer_y, spec.lid_outer_z)

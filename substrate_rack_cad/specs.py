"""Parameter objects for the substrate rack, holder, and storage box.

All distances are in mm. Every part takes the same `SubstrateSpec`, which is the
Common Denominator Geometry (CDG): the slot width and clearances that any part
holding a substrate must agree on.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

import build123d_ease as bde
from loguru import logger


@dataclass(kw_only=True)
class SubstrateSpec:
    """Substrate (slide) dimensions and the slot interface shared by all parts."""

    # AOCL footprint.
    size_x: float = 25.4
    size_y: float = 25.4
    thickness: float = 1.1

    # Extra slot width beyond the substrate thickness.
    slot_clearance: float = 0.3
    # Gap at each edge of the substrate, along the slot length.
    edge_clearance: float = 0.4

    @property
    def slot_width(self) -> float:
        """Width of a slot that accepts one substrate."""
        return self.thickness + self.slot_clearance

    @property
    def slot_length(self) -> float:
        """Length of a slot that accepts one substrate."""
        return self.size_x + 2 * self.edge_clearance

    def __post_init__(self) -> None:
        """Validate the dimensions."""
        for name in ("size_x", "size_y", "thickness"):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)}"
                raise ValueError(msg)

        for name in ("slot_clearance", "edge_clearance"):
            if getattr(self, name) < 0:
                msg = f"{name} must not be negative, got {getattr(self, name)}"
                raise ValueError(msg)

        data = {
            "slot_width": self.slot_width,
            "slot_length": self.slot_length,
        }
        logger.info(f"Substrate slot interface: {json.dumps(data, indent=2)}")


@dataclass(kw_only=True)
class RackSpec:
    """Specification for the multi-slot rack."""

    substrate: SubstrateSpec = field(default_factory=SubstrateSpec)

    slot_count: int = 10
    rib_thickness: float = 1.6
    # Fraction of the substrate height held by the ribs.
    rib_height_ratio: float = 0.4

    base_thickness: float = 2.0
    end_wall_thickness: float = 2.5
    side_wall_thickness: float = 2.0

    # Channel through the ribs so the substrates can be gripped by their faces.
    finger_cutout: bool = True
    finger_cutout_width: float = 12
    finger_cutout_depth_ratio: float = 0.5

    # Pull tabs at each X end, flush with the top of the rack.
    handles: bool = True
    handle_length: float = 10
    handle_width: float = 16
    handle_thickness: float = 3
    handle_hole_d: float = 6

    label_recess: bool = True
    label_depth: float = 0.6
    label_margin: float = 2

    drain_slots: bool = False
    drain_slot_length_ratio: float = 0.5

    @property
    def slot_pitch(self) -> float:
        """Center-to-center distance between adjacent slots."""
        return self.substrate.slot_width + self.rib_thickness

    @property
    def rib_height(self) -> float:
        """Height of the ribs (and depth of the slots) above the base."""
        return self.substrate.size_y * self.rib_height_ratio

    @property
    def slot_span_x(self) -> float:
        """Distance from the outer face of the first slot to that of the last."""
        return (
            self.slot_count * self.substrate.slot_width
            + (self.slot_count - 1) * self.rib_thickness
        )

    @property
    def body_x(self) -> float:
        """Length of the rack body, excluding handles."""
        return self.slot_span_x + 2 * self.end_wall_thickness

    @property
    def body_y(self) -> float:
        """Width of the rack body."""
        return self.substrate.slot_length + 2 * self.side_wall_thickness

    @property
    def body_z(self) -> float:
        """Height of the rack body."""
        return self.base_thickness + self.rib_height

    @property
    def overall_x(self) -> float:
        """Length of the rack, including handles."""
        if self.handles:
            return self.body_x + 2 * self.handle_length
        return self.body_x

    @property
    def slot_centers_x(self) -> list[float]:
        """X position of each slot center."""
        return bde.evenly_space_with_center(
            count=self.slot_count,
            spacing=self.slot_pitch,
        )

    @property
    def slide_top_z(self) -> float:
        """Z of the top edge of a seated substrate."""
        return self.base_thickness + self.substrate.size_y

    @property
    def finger_cutout_depth(self) -> float:
        """Depth of the finger cutout, measured down from the top of the ribs."""
        return self.rib_height * self.finger_cutout_depth_ratio

    def __post_init__(self) -> None:
        """Validate the dimensions."""
        if self.slot_count < 1:
            msg = f"slot_count must be at least 1, got {self.slot_count}"
            raise ValueError(msg)

        if not 0 < self.rib_height_ratio <= 1:
            msg = f"rib_height_ratio must be in (0, 1], got {self.rib_height_ratio}"
            raise ValueError(msg)

        for name in (
            "rib_thickness",
            "base_thickness",
            "end_wall_thickness",
            "side_wall_thickness",
        ):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)}"
                raise ValueError(msg)

        if self.finger_cutout:
            if not 0 < self.finger_cutout_width < self.substrate.slot_length:
                msg = (
                    "finger_cutout_width must be positive and less than the slot "
                    f"length ({self.substrate.slot_length:.3f})"
                )
                raise ValueError(msg)
            if not 0 < self.finger_cutout_depth_ratio <= 1:
                msg = (
                    "finger_cutout_depth_ratio must be in (0, 1], "
                    f"got {self.finger_cutout_depth_ratio}"
                )
                raise ValueError(msg)

        if self.handles:
            if not 0 < self.handle_width <= self.body_y:
                msg = f"handle_width must be in (0, {self.body_y:.3f}]"
                raise ValueError(msg)
            if not 0 < self.handle_thickness <= self.body_z:
                msg = f"handle_thickness must be in (0, {self.body_z:.3f}]"
                raise ValueError(msg)
            if not 0 < self.handle_hole_d < min(self.handle_length, self.handle_width):
                msg = "handle_hole_d must be positive and fit inside the handle"
                raise ValueError(msg)

        if self.label_recess:
            if not 0 < self.label_depth < self.side_wall_thickness:
                msg = "label_depth must be positive and less than side_wall_thickness"
                raise ValueError(msg)
            if self.body_z <= 2 * self.label_margin:
                msg = "label_margin leaves no room for a label on the rack side"
                raise ValueError(msg)

        if self.drain_slots and not 0 < self.drain_slot_length_ratio <= 1:
            msg = "drain_slot_length_ratio must be in (0, 1]"
            raise ValueError(msg)

        data = {
            "slot_pitch": self.slot_pitch,
            "rib_height": self.rib_height,
            "body_x": self.body_x,
            "body_y": self.body_y,
            "body_z": self.body_z,
            "overall_x": self.overall_x,
        }
        logger.info(f"Rack dimensions: {json.dumps(data, indent=2)}")


@dataclass(kw_only=True)
class HolderSpec:
    """Specification for the single-substrate holder."""

    substrate: SubstrateSpec = field(default_factory=SubstrateSpec)

    wall_thickness: float = 2.5
    base_thickness: float = 2.0
    slot_depth_ratio: float = 0.4

    # Bumps on one slot face that pinch the substrate.
    retention_ribs: bool = True
    retention_rib_count: int = 2
    retention_rib_width: float = 1.5
    retention_interference: float = 0.1

    # Wider pocket at the slot mouth to guide the substrate in.
    lead_in: bool = True
    lead_in_depth: float = 1.0
    lead_in_extra: float = 0.8

    feet: bool = True
    foot_length: float = 8

    label_recess: bool = True
    label_depth: float = 0.6
    label_margin: float = 2

    @property
    def slot_depth(self) -> float:
        """Depth of the slot, above the base."""
        return self.substrate.size_y * self.slot_depth_ratio

    @property
    def body_x(self) -> float:
        """Thickness of the holder body, across the slot."""
        return self.substrate.slot_width + 2 * self.wall_thickness

    @property
    def body_y(self) -> float:
        """Length of the holder body, along the slot."""
        return self.substrate.slot_length + 2 * self.wall_thickness

    @property
    def body_z(self) -> float:
        """Height of the holder body."""
        return self.base_thickness + self.slot_depth

    @property
    def overall_x(self) -> float:
        """Footprint in X, including feet."""
        if self.feet:
            return self.body_x + 2 * self.foot_length
        return self.body_x

    @property
    def rib_protrusion(self) -> float:
        """Distance each retention rib sticks out of the -X slot face."""
        return self.substrate.slot_clearance + self.retention_interference

    @property
    def retained_gap(self) -> float:
        """Gap left between the retention ribs and the opposite slot face."""
        return self.substrate.slot_width - self.rib_protrusion

    @property
    def rib_height(self) -> float:
        """Height of the retention ribs above the slot floor."""
        if self.lead_in:
            return self.slot_depth - self.lead_in_depth
        return self.slot_depth

    @property
    def rib_centers_y(self) -> list[float]:
        """Y position of each retention rib."""
        return bde.evenly_space_with_center(
            count=self.retention_rib_count,
            spacing=self.substrate.slot_length / self.retention_rib_count,
        )

    def __post_init__(self) -> None:
        """Validate the dimensions."""
        for name in ("wall_thickness", "base_thickness"):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)}"
                raise ValueError(msg)

        if not 0 < self.slot_depth_ratio <= 1:
            msg = f"slot_depth_ratio must be in (0, 1], got {self.slot_depth_ratio}"
            raise ValueError(msg)

        if self.lead_in:
            if not 0 < self.lead_in_depth < self.slot_depth:
                msg = "lead_in_depth must be positive and less than the slot depth"
                raise ValueError(msg)
            if not 0 < self.lead_in_extra < self.wall_thickness:
                msg = "lead_in_extra must be positive and less than wall_thickness"
                raise ValueError(msg)

        if self.retention_ribs:
            if self.retention_rib_count < 1:
                msg = "retention_rib_count must be at least 1"
                raise ValueError(msg)
            if not (
                0
                < self.retention_rib_width
                < self.substrate.slot_length / self.retention_rib_count
            ):
                msg = "retention_rib_width does not fit along the slot"
                raise ValueError(msg)
            if not 0 < self.retained_gap < self.substrate.thickness:
                msg = (
                    "retention ribs must pinch the substrate: retained gap "
                    f"{self.retained_gap:.3f} is outside "
                    f"(0, {self.substrate.thickness})"
                )
                raise ValueError(msg)
            if self.retained_gap < self.substrate.thickness / 2:
                logger.warning(
                    f"Retained gap is only {self.retained_gap:.3f} mm. "
                    "Inserting a substrate may crack it. "
                    "Reduce `retention_interference`, probably.",
                )

        if self.feet and self.foot_length <= 0:
            msg = "foot_length must be positive"
            raise ValueError(msg)

        if self.label_recess:
            if not 0 < self.label_depth < self.wall_thickness:
                msg = "label_depth must be positive and less than wall_thickness"
                raise ValueError(msg)
            if self.slot_depth <= 2 * self.label_margin:
                msg = "label_margin leaves no room for a label on the holder face"
                raise ValueError(msg)

            # Beside the lead-in pocket, the +X wall is thinner.
            if (
                self.lead_in
                and self.label_margin < self.lead_in_depth
                and self.label_depth >= self.wall_thickness - self.lead_in_extra
            ):
                msg = (
                    f"label_depth {self.label_depth:.3f} cuts through the wall beside "
                    "the lead-in pocket "
                    f"({self.wall_thickness - self.lead_in_extra:.3f} thick). "
                    "Increase label_margin to at least lead_in_depth, or reduce "
                    "label_depth or lead_in_extra."
                )
                raise ValueError(msg)

        data = {
            "body_x": self.body_x,
            "body_y": self.body_y,
            "body_z": self.body_z,
            "overall_x": self.overall_x,
            "retained_gap": self.retained_gap,
        }
        logger.info(f"Holder dimensions: {json.dumps(data, indent=2)}")


@dataclass(kw_only=True)
class BoxSpec:
    """Specification for the storage box base and its lid."""

    rack: RackSpec = field(default_factory=RackSpec)

    rack_count: int = 2
    rack_gap: float = 1.0
    rack_clearance: float = 0.8

    wall_thickness: float = 2.0
    floor_thickness: float = 2.0
    # Space between the top edge of a seated substrate and the box rim.
    headroom: float = 1.5

    lid_clearance: float = 0.3
    lid_wall_thickness: float = 2.0
    lid_top_thickness: float = 2.0
    lid_skirt_height: float = 12

    latches: bool = True
    latch_width: float = 8
    latch_slit_width: float = 1.0
    # Uncut skirt between the lid top and the top of the latch slits.
    latch_root_margin: float = 3
    latch_engagement: float = 0.6
    latch_hook_height: float = 1.5
    latch_clearance: float = 0.2

    label_recess: bool = True
    label_depth: float = 0.6
    label_margin: float = 2

    @property
    def cavity_x(self) -> float:
        """Inside length of the box."""
        return self.rack.overall_x + 2 * self.rack_clearance

    @property
    def cavity_y(self) -> float:
        """Inside width of the box."""
        return (
            self.rack_count * self.rack.body_y
            + (self.rack_count - 1) * self.rack_gap
            + 2 * self.rack_clearance
        )

    @property
    def cavity_z(self) -> float:
        """Inside height of the box, from the floor to the rim."""
        return self.rack.slide_top_z + self.headroom

    @property
    def outer_x(self) -> float:
        """Outside length of the box base."""
        return self.cavity_x + 2 * self.wall_thickness

    @property
    def outer_y(self) -> float:
        """Outside width of the box base."""
        return self.cavity_y + 2 * self.wall_thickness

    @property
    def outer_z(self) -> float:
        """Outside height of the box base."""
        return self.floor_thickness + self.cavity_z

    @property
    def rack_centers_y(self) -> list[float]:
        """Y position of each rack in the box."""
        return bde.evenly_space_with_center(
            count=self.rack_count,
            spacing=self.rack.body_y + self.rack_gap,
        )

    @property
    def lid_inner_x(self) -> float:
        """Inside length of the lid skirt."""
        return self.outer_x + 2 * self.lid_clearance

    @property
    def lid_inner_y(self) -> float:
        """Inside width of the lid skirt."""
        return self.outer_y + 2 * self.lid_clearance

    @property
    def lid_outer_x(self) -> float:
        """Outside length of the lid."""
        return self.lid_inner_x + 2 * self.lid_wall_thickness

    @property
    def lid_outer_y(self) -> float:
        """Outside width of the lid."""
        return self.lid_inner_y + 2 * self.lid_wall_thickness

    @property
    def lid_outer_z(self) -> float:
        """Outside height of the lid."""
        return self.lid_top_thickness + self.lid_skirt_height

    @property
    def lid_seat_z(self) -> float:
        """Z of the lid rim (skirt bottom) when the lid is closed on the box."""
        return self.outer_z - self.lid_skirt_height

    @property
    def closed_height(self) -> float:
        """Height of the closed box."""
        return self.outer_z + self.lid_top_thickness

    @property
    def latch_arm_length(self) -> float:
        """Length of the cantilever arm cut into the lid skirt."""
        return self.lid_skirt_height - self.latch_root_margin

    @property
    def latch_arm_thickness(self) -> float:
        """Thickness of the cantilever arm (the lid wall)."""
        return self.lid_wall_thickness

    @property
    def latch_hook_protrusion(self) -> float:
        """Distance the hook sticks in from the inner face of the lid skirt."""
        return self.lid_clearance + self.latch_engagement

    @property
    def latch_catch_depth(self) -> float:
        """Depth of the catch groove in the box wall."""
        return self.latch_engagement + self.latch_clearance

    @property
    def box_label_height(self) -> float:
        """Height of the label recess on the box front, below the lid skirt."""
        return self.lid_seat_z - 2 * self.label_margin

    def __post_init__(self) -> None:
        """Validate the dimensions."""
        if self.rack_count < 1:
            msg = f"rack_count must be at least 1, got {self.rack_count}"
            raise ValueError(msg)

        for name in (
            "wall_thickness",
            "floor_thickness",
            "lid_wall_thickness",
            "lid_top_thickness",
        ):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)}"
                raise ValueError(msg)

        for name in ("rack_gap", "rack_clearance", "lid_clearance"):
            if getattr(self, name) < 0:
                msg = f"{name} must not be negative, got {getattr(self, name)}"
                raise ValueError(msg)

        if self.headroom < 0:
            msg = "headroom must not be negative (substrates would stick out of the box)"
            raise ValueError(msg)

        if not 0 < self.lid_skirt_height < self.outer_z - self.floor_thickness:
            msg = (
                "lid_skirt_height must be positive and shorter than the box walls "
                f"({self.outer_z - self.floor_thickness:.3f})"
            )
            raise ValueError(msg)

        if self.latches:
            if self.latch_slit_width <= 0:
                msg = "latch_slit_width must be positive"
                raise ValueError(msg)
            if not 0 < self.latch_width < self.outer_y - 2 * self.latch_slit_width:
                msg = "latch_width does not fit on the lid side"
                raise ValueError(msg)
            if not 0 < self.latch_hook_height < self.latch_arm_length:
                msg = (
                    "latch_hook_height must be positive and shorter than the latch "
                    f"arm ({self.latch_arm_length:.3f})"
                )
                raise ValueError(msg)
            if self.latch_engagement <= 0:
                msg = "latch_engagement must be positive"
                raise ValueError(msg)
            if self.latch_clearance < 0:
                msg = "latch_clearance must not be negative"
                raise ValueError(msg)
            if self.latch_catch_depth >= self.wall_thickness:
                msg = (
                    f"latch catch depth {self.latch_catch_depth:.3f} cuts through "
                    "the box wall"
                )
                raise ValueError(msg)

        if self.label_recess:
            if not 0 < self.label_depth < min(
                self.wall_thickness,
                self.lid_top_thickness,
            ):
                msg = (
                    "label_depth must be positive and less than the wall and lid top "
                    "thickness"
                )
                raise ValueError(msg)
            if self.box_label_height <= 0:
                msg = "label_margin leaves no room for a label below the lid skirt"
                raise ValueError(msg)

        # The racks must fit in the cavity.
        assert self.cavity_x >= self.rack.overall_x
        assert self.cavity_y >= (
            self.rack_count * self.rack.body_y + (self.rack_count - 1) * self.rack_gap
        )
        assert self.cavity_z >= self.rack.slide_top_z

        data = {
            "cavity": (self.cavity_x, self.cavity_y, self.cavity_z),
            "outer": (self.outer_x, self.outer_y, self.outer_z),
            "lid_outer": (self.lid_outer_x, self.lid_outer_y, self.lid_outer_z),
            "closed_height": self.closed_height,
            "latch_arm_length": self.latch_arm_length,
        }
        logger.info(f"Box dimensions: {json.dumps(data, indent=2)}")


# Order matters: later groups receive the objects built from earlier ones.
PARAM_GROUPS = ("substrate", "rack", "holder", "box")

_GROUP_CLASSES = {
    "substrate": SubstrateSpec,
    "rack": RackSpec,
    "holder": HolderSpec,
    "box": BoxSpec,
}

# Fields holding nested specs, which are wired up by `design_from_flat`.
_NESTED_FIELDS = {"substrate", "rack"}


@dataclass(kw_only=True)
class Design:
    """A full set of parts sharing one substrate interface."""

    substrate: SubstrateSpec
    rack: RackSpec
    holder: HolderSpec
    box: BoxSpec

    def info(self) -> dict[str, float | int]:
        """Get the headline derived dimensions."""
        return {
            "slot_width": self.substrate.slot_width,
            "slot_pitch": self.rack.slot_pitch,
            "rack_body_x": self.rack.body_x,
            "rack_overall_x": self.rack.overall_x,
            "rack_body_y": self.rack.body_y,
            "holder_overall_x": self.holder.overall_x,
            "box_outer_x": self.box.outer_x,
            "box_outer_y": self.box.outer_y,
            "box_outer_z": self.box.outer_z,
            "lid_outer_x": self.box.lid_outer_x,
            "lid_outer_y": self.box.lid_outer_y,
            "closed_height": self.box.closed_height,
            "substrate_capacity": self.box.rack_count * self.rack.slot_count,
        }

    def to_flat(self) -> dict[str, float | int | bool]:
        """Get the parameters as a flat `<group>.<field>` mapping."""
        flat: dict[str, float | int | bool] = {}
        for group in PARAM_GROUPS:
            spec = getattr(self, group)
            for key, value in asdict(spec).items():
                if key in _NESTED_FIELDS:
                    continue
                flat[f"{group}.{key}"] = value
        return flat


def default_design() -> Design:
    """Make the design with every parameter at its default."""
    return design_from_flat({})


def _check_value_type(key: str, value: object, expected: type) -> None:
    """Raise `ValueError` if a flat parameter value has the wrong JSON type.

    `bool` is a subclass of `int`, so it is checked explicitly. Whole numbers are
    accepted for float fields (`1` for `1.0`).
    """
    if expected is bool:
        ok = isinstance(value, bool)
        kind = "true or false"
    elif expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
        kind = "an integer"
    elif expected is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        kind = "a number"
    else:
        msg = f"Parameter {key!r} has unsupported type {expected!r}."
        raise TypeError(msg)

    if not ok:
        msg = f"Parameter {key!r} must be {kind}, got {value!r}."
        raise ValueError(msg)


def design_from_flat(params: dict[str, object]) -> Design:
    """Make a design from a flat `<group>.<field>` mapping.

    Missing keys keep their defaults. Unknown groups or fields, and values of the
    wrong type, raise `ValueError`.
    """
    grouped: dict[str, dict[str, object]] = {group: {} for group in PARAM_GROUPS}

    for key, value in params.items():
        group, _, name = key.partition(".")
        if group not in grouped or not name:
            msg = (
                f"Invalid parameter key {key!r}. "
                f"Expected '<group>.<field>' with group in {PARAM_GROUPS}."
            )
            raise ValueError(msg)

        field_types = {
            f.name: f.type
            for f in fields(_GROUP_CLASSES[group])
            if f.name not in _NESTED_FIELDS
        }
        if name not in field_types:
            msg = f"Unknown parameter {key!r}."
            raise ValueError(msg)

        _check_value_type(key, value, field_types[name])
        grouped[group][name] = value

    substrate = SubstrateSpec(**grouped["substrate"])
    rack = RackSpec(substrate=substrate, **grouped["rack"])
    holder = HolderSpec(substrate=substrate, **grouped["holder"])
    box = BoxSpec(rack=rack, **grouped["box"])

    design = Design(substrate=substrate, rack=rack, holder=holder, box=box)
    logger.success(f"Design validated: {json.dumps(design.info(), indent=4)}")
    return design


def load_design(path: Path) -> Design:
    """Load a design from a flat JSON parameter file."""
    logger.info(f"Loading parameters from {path}")
    params = json.loads(Path(path).read_text())

    if not isinstance(params, dict):
        msg = f"Parameter file {path} must contain a JSON object."
        raise ValueError(msg)  # noqa: TRY004

    return design_from_flat(params)


def save_design(design: Design, path: Path) -> None:
    """Write a design to a flat JSON parameter file."""
    Path(path).write_text(json.dumps(design.to_flat(), indent=4) + "\n")
    logger.info(f"Saved parameters to {path}")

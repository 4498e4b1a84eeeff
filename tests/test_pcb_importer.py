"""Tests for the PCB importer."""

import logging
import uuid

import pytest

from hwt_kicad.exceptions import FileFormatError, MalformedElementError, MissingElementError
from hwt_kicad.identifiers import DeterministicIdSource
from hwt_kicad.importers.pcb import (
    PcbImporter,
    classify_via,
    import_pcb,
    pad_shape_from_token,
    pad_type_from_token,
)
from hwt_kicad.models import (
    ComponentLayer,
    LayerType,
    OutlineType,
    PadShape,
    PadType,
    Point2D,
    Position,
    ViaType,
    ZoneFillType,
)


def _pcb(body: str) -> str:
    return f"(kicad_pcb (version 20231014) {body})"


class TestMinimalPcb:
    """One footprint with two pads, one segment, one through via."""

    def test_counts(self, minimal_pcb_text):
        layout = import_pcb(minimal_pcb_text)
        assert len(layout.components) == 1
        assert len(layout.components[0].pads) == 2
        assert len(layout.traces) == 1
        assert len(layout.vias) == 1
        assert layout.zones == []

    def test_footprint(self, minimal_pcb_text):
        fp = import_pcb(minimal_pcb_text).components[0]
        assert fp.footprint == "Resistor_SMD:R_0603"
        assert fp.reference == "R1"
        assert fp.value == "10k"
        assert fp.position == Position(100, 50)
        assert fp.rotation == 90.0
        assert fp.layer == ComponentLayer.TOP
        assert fp.locked is False
        assert fp.id == uuid.UUID("00000000-0000-0000-0000-0000000000a1")

    def test_pads(self, minimal_pcb_text):
        pads = import_pcb(minimal_pcb_text).components[0].pads
        assert [p.number for p in pads] == ["1", "2"]
        pad = pads[0]
        assert pad.pad_type == PadType.SMD
        assert pad.shape == PadShape.ROUND_RECT
        assert pad.position == Point2D(-0.8, 0)
        assert pad.size == (0.8, 0.95)
        assert pad.drill == 0.0
        assert pad.net == "VCC"
        assert pad.layers == ["F.Cu", "F.Paste", "F.Mask"]

    def test_trace(self, minimal_pcb_text):
        trace = import_pcb(minimal_pcb_text).traces[0]
        assert trace.width == 0.25
        assert trace.layer == "F.Cu"
        assert trace.net == "VCC"
        assert trace.start == Position(100, 50)
        assert trace.end == Position(110, 50)
        assert trace.length == pytest.approx(10.0)

    def test_via(self, minimal_pcb_text):
        via = import_pcb(minimal_pcb_text).vias[0]
        assert via.pad == 0.6
        assert via.drill == 0.3
        assert via.via_type == ViaType.THROUGH
        assert via.start_layer == "F.Cu"
        assert via.end_layer == "B.Cu"
        assert via.position == Position(110, 50)
        assert via.net == "VCC"

    def test_net_table(self, minimal_pcb_text):
        layout = import_pcb(minimal_pcb_text)
        assert layout.nets == {0: "", 1: "VCC", 2: "GND"}

    def test_layers_from_block_plus_standard(self, minimal_pcb_text):
        """Declared layers keep order; missing standard layers are appended."""
        layers = import_pcb(minimal_pcb_text).layers
        assert [layer.name for layer in layers] == [
            "F.Cu",
            "B.Cu",
            "B.SilkS",
            "F.SilkS",
            "Edge.Cuts",
            "F.Mask",
            "B.Mask",
        ]
        assert layers[0].layer_type == LayerType.COPPER
        assert layers[2].layer_type == LayerType.FABRICATION
        assert layers[5].layer_type == LayerType.SOLDER_MASK

    def test_component_lookup_and_summary(self, minimal_pcb_text):
        layout = import_pcb(minimal_pcb_text)
        assert layout.get_component("R1") is layout.components[0]
        summary = layout.summary()
        assert summary["footprints"] == 1
        assert summary["copper_layers"] == 2
        assert summary["trace_length_mm"] == 10.0


class TestNets:
    """Tests for net resolution."""

    def test_without_net_table_keeps_index_text(self):
        layout = import_pcb(_pcb("(segment (start 0 0) (end 1 0) (net 1))"))
        assert layout.traces[0].net == "1"

    def test_named_net_token_kept(self):
        layout = import_pcb(_pcb('(segment (start 0 0) (end 1 0) (net "GND"))'))
        assert layout.traces[0].net == "GND"

    def test_quoted_net_is_a_name(self):
        """A quoted token is a net name even when it looks like an index."""
        text = _pcb('(net 1 "GND") (segment (start 0 0) (end 1 0) (net "1")) (via (at 0 0) (net 1))')
        layout = import_pcb(text)
        assert layout.traces[0].net == "1"
        assert layout.vias[0].net == "GND"

    def test_missing_net_is_empty(self):
        layout = import_pcb(_pcb("(via (at 0 0))"))
        assert layout.vias[0].net == ""


class TestLayers:
    """Tests for the layer stack."""

    def test_default_stack(self):
        layers = import_pcb("(kicad_pcb)").layers
        names = [layer.name for layer in layers]
        assert names[:2] == ["F.Cu", "B.Cu"]
        assert len(names) == len(set(names))
        for name in ("F.SilkS", "B.SilkS", "F.Mask", "B.Mask", "Edge.Cuts"):
            assert name in names

    def test_short_entries_skipped(self):
        layers = import_pcb(_pcb('(layers (0 "F.Cu" signal) (1 "Short") (2 "In1.Cu" power))')).layers
        assert [layer.name for layer in layers[:2]] == ["F.Cu", "In1.Cu"]
        assert layers[1].layer_type == LayerType.COPPER

    def test_stackup_fills_thickness_and_material(self):
        text = _pcb(
            '(layers (0 "F.Cu" signal) (31 "B.Cu" signal))'
            "(setup (stackup"
            ' (layer "F.Mask" (type "Top Solder Mask") (thickness 0.01) (material "LPI"))'
            ' (layer "F.Cu" (type "copper") (thickness 0.035))'
            ' (layer "dielectric 1" (type "core") (thickness 1.51) (material "FR4"))'
            "))"
        )
        layout = import_pcb(text)
        assert layout.get_layer("F.Cu").thickness == 0.035
        assert layout.get_layer("F.Cu").material is None
        assert layout.get_layer("F.Mask").material == "LPI"
        assert layout.get_layer("dielectric 1") is None


class TestFootprints:
    """Tests for footprints and pads."""

    def test_defaults(self):
        fp = import_pcb(_pcb("(footprint)")).components[0]
        assert fp.footprint == "Unknown"
        assert fp.reference == "U?"
        assert fp.value == ""
        assert fp.position == Position(0, 0)
        assert fp.pads == []

    def test_bottom_side(self):
        fp = import_pcb(_pcb('(footprint "X" (layer "B.Cu"))')).components[0]
        assert fp.layer == ComponentLayer.BOTTOM

    def test_property_fallback(self):
        """Newer files carry reference and value as properties."""
        text = _pcb('(footprint "X" (property "Reference" "U3") (property "Value" "MCU"))')
        fp = import_pcb(text).components[0]
        assert fp.reference == "U3"
        assert fp.value == "MCU"

    def test_locked(self):
        layout = import_pcb(_pcb('(footprint "X" locked) (footprint "Y" (locked yes)) (footprint "Z")'))
        assert [fp.locked for fp in layout.components] == [True, True, False]

    def test_pad_defaults(self):
        pad = import_pcb(_pcb('(footprint "X" (pad))')).components[0].pads[0]
        assert pad.number == "1"
        assert pad.pad_type == PadType.SMD
        assert pad.shape == PadShape.RECT
        assert pad.size == (1.0, 1.0)
        assert pad.drill == 0.0
        assert pad.net is None

    def test_thru_hole_pad_drill(self):
        text = _pcb('(footprint "X" (pad "1" thru_hole circle (at 0 0) (size 1.7 1.7) (drill 1.0)))')
        pad = import_pcb(text).components[0].pads[0]
        assert pad.pad_type == PadType.THRU_HOLE
        assert pad.shape == PadShape.CIRCLE
        assert pad.drill == 1.0

    def test_oval_drill(self):
        text = _pcb('(footprint "X" (pad "1" thru_hole oval (drill oval 0.8 1.6)))')
        assert import_pcb(text).components[0].pads[0].drill == 0.8

    def test_npth_pad(self):
        text = _pcb('(footprint "X" (pad "" np_thru_hole circle))')
        assert import_pcb(text).components[0].pads[0].pad_type == PadType.NPTH

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("thru_hole", PadType.THRU_HOLE),
            ("smd", PadType.SMD),
            ("np_thru_hole", PadType.NPTH),
            ("connect", PadType.CONNECT),
            ("weird", PadType.SMD),
            (None, PadType.SMD),
        ],
    )
    def test_pad_type_mapping_is_total(self, token, expected):
        assert pad_type_from_token(token) == expected

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("circle", PadShape.CIRCLE),
            ("rect", PadShape.RECT),
            ("oval", PadShape.OVAL),
            ("roundrect", PadShape.ROUND_RECT),
            ("trapezoid", PadShape.TRAPEZOID),
            ("custom", PadShape.CUSTOM),
            ("hexagon", PadShape.RECT),
            (None, PadShape.RECT),
        ],
    )
    def test_pad_shape_mapping_is_total(self, token, expected):
        assert pad_shape_from_token(token) == expected


class TestTracesAndVias:
    """Tests for segments and vias."""

    def test_segment_defaults(self):
        trace = import_pcb(_pcb("(segment (start 0 0) (end 5 0))")).traces[0]
        assert trace.width == 0.25
        assert trace.layer == "F.Cu"
        assert trace.net == ""

    def test_segment_without_end_fails(self):
        with pytest.raises(MissingElementError, match="Segment missing end point"):
            import_pcb(_pcb("(segment (start 0 0) (width 0.2))"))

    def test_segment_without_start_fails(self):
        with pytest.raises(MissingElementError, match="Segment missing start point"):
            import_pcb(_pcb("(segment (end 0 0))"))

    def test_via_without_position_fails(self):
        with pytest.raises(MissingElementError, match="Via missing position"):
            import_pcb(_pcb("(via (size 0.6) (drill 0.3))"))

    def test_via_defaults(self):
        via = import_pcb(_pcb("(via (at 1 2))")).vias[0]
        assert via.pad == 0.6
        assert via.drill == 0.3
        assert via.via_type == ViaType.THROUGH
        assert via.start_layer is None
        assert via.end_layer is None

    def test_blind_via(self):
        via = import_pcb(_pcb('(via (at 0 0) (layers "F.Cu" "In1.Cu"))')).vias[0]
        assert via.via_type == ViaType.BLIND
        assert via.start_layer == "F.Cu"
        assert via.end_layer == "In1.Cu"

    @pytest.mark.parametrize(
        "layers,expected",
        [
            (["F.Cu", "B.Cu"], (ViaType.THROUGH, "F.Cu", "B.Cu")),
            (["B.Cu", "F.Cu"], (ViaType.BLIND, "B.Cu", "F.Cu")),
            (["In1.Cu", "B.Cu"], (ViaType.BLIND, "In1.Cu", "B.Cu")),
            (["F.Cu", "In1.Cu", "B.Cu"], (ViaType.THROUGH, "F.Cu", "B.Cu")),
            (["F.Cu"], (ViaType.THROUGH, None, None)),
            ([], (ViaType.THROUGH, None, None)),
        ],
    )
    def test_classify_via(self, layers, expected):
        assert classify_via(layers) == expected


class TestZones:
    """Tests for copper zones."""

    def test_zone(self, zone_pcb_text):
        layout = import_pcb(zone_pcb_text)
        assert len(layout.zones) == 1
        zone = layout.zones[0]
        assert zone.net == "GND"
        assert zone.layer == "F.Cu"
        assert len(zone.points) == 4
        assert zone.points[2] == Point2D(50, 40)
        assert zone.fill_type == ZoneFillType.SOLID
        assert zone.clearance == 0.5
        assert zone.min_width == 0.25

    def test_fill_absent_is_solid(self):
        zone = import_pcb(_pcb("(zone)")).zones[0]
        assert zone.fill_type == ZoneFillType.SOLID
        assert zone.points == []
        assert zone.layer == "F.Cu"
        assert zone.clearance is None

    def test_fill_not_yes_is_none(self):
        zone = import_pcb(_pcb("(zone (fill (thermal_gap 0.5)))")).zones[0]
        assert zone.fill_type == ZoneFillType.NONE

    def test_hatched_fill(self):
        zone = import_pcb(_pcb("(zone (fill yes (mode hatch)))")).zones[0]
        assert zone.fill_type == ZoneFillType.HATCHED

    def test_layers_fallback(self):
        zone = import_pcb(_pcb('(zone (layers "B.Cu" "F.Cu"))')).zones[0]
        assert zone.layer == "B.Cu"

    def test_direct_clearance_wins(self):
        zone = import_pcb(_pcb("(zone (clearance 0.3) (connect_pads (clearance 0.5)))")).zones[0]
        assert zone.clearance == 0.3


class TestOutline:
    """Tests for the board outline."""

    def test_no_outline(self, minimal_pcb_text):
        assert import_pcb(minimal_pcb_text).outline is None

    def test_rectangle(self):
        text = _pcb(
            '(gr_rect (start 0 0) (end 10 10) (layer "F.SilkS"))'
            '(gr_rect (start 10 20) (end 110 100) (layer "Edge.Cuts"))'
        )
        outline = import_pcb(text).outline
        assert outline.outline_type == OutlineType.RECTANGLE
        assert outline.width == 100
        assert outline.height == 80
        assert outline.points == [
            Point2D(10, 20),
            Point2D(110, 20),
            Point2D(110, 100),
            Point2D(10, 100),
        ]

    def test_polygon(self):
        text = _pcb('(gr_poly (pts (xy 0 0) (xy 30 0) (xy 15 20)) (layer "Edge.Cuts"))')
        outline = import_pcb(text).outline
        assert outline.outline_type == OutlineType.POLYGON
        assert len(outline.points) == 3
        assert outline.width is None


class TestDocumentErrors:
    """Tests for document-level failures."""

    def test_wrong_root_tag(self, minimal_schematic_text):
        with pytest.raises(FileFormatError, match="Not a valid KiCAD PCB file"):
            import_pcb(minimal_schematic_text)

    def test_bad_segment_returns_nothing(self, minimal_pcb_text):
        """A hard failure aborts the whole import."""
        text = minimal_pcb_text.rstrip().rstrip(")") + "(segment (start 0 0)))"
        with pytest.raises(MissingElementError):
            import_pcb(text)


class TestIdentifiers:
    def test_deterministic_equal(self, minimal_pcb_text):
        text = minimal_pcb_text.replace('(uuid "00000000-0000-0000-0000-0000000000a1")', "")
        first = import_pcb(text, id_source=DeterministicIdSource())
        second = import_pcb(text, id_source=DeterministicIdSource())
        assert first == second

    def test_explicit_footprint_id_kept(self, minimal_pcb_text):
        first = import_pcb(minimal_pcb_text)
        second = import_pcb(minimal_pcb_text)
        assert first.components[0].id == second.components[0].id


class TestBestEffort:
    """A broken footprint is skipped, the rest still imports."""

    @pytest.fixture
    def flaky_footprint(self, monkeypatch):
        original = PcbImporter._footprint

        def flaky(self, node, index):
            if node.get_atom(0) == "Broken":
                raise MalformedElementError("broken footprint")
            return original(self, node, index)

        monkeypatch.setattr(PcbImporter, "_footprint", flaky)

    def test_failed_footprint_is_dropped(self, flaky_footprint, caplog):
        text = _pcb('(footprint "Broken") (footprint "Good") (segment (start 0 0) (end 1 1))')
        with caplog.at_level(logging.WARNING, logger="hwt_kicad"):
            layout = import_pcb(text)
        assert [fp.footprint for fp in layout.components] == ["Good"]
        assert len(layout.traces) == 1
        assert "Skipping malformed footprint #0" in caplog.text

    def test_strict_propagates(self, flaky_footprint):
        with pytest.raises(MalformedElementError, match="broken footprint"):
            import_pcb(_pcb('(footprint "Broken")'), strict=True)

"""Pytest fixtures for hwt-kicad tests."""

import pytest

# One resistor, one wire, one label, one junction
MINIMAL_SCHEMATIC = """(kicad_sch
  (version 20231120)
  (generator "eeschema")
  (uuid "00000000-0000-0000-0000-000000000001")
  (paper "A4")
  (lib_symbols)
  (symbol
    (lib_id "Device:R")
    (at 100 50 0)
    (unit 1)
    (uuid "00000000-0000-0000-0000-000000000002")
    (property "Reference" "R1" (at 100 40 0) (effects (font (size 1.27 1.27))))
    (property "Value" "10k" (at 100 60 0) (effects (font (size 1.27 1.27))))
    (property "Footprint" "Resistor_SMD:R_0603_1608Metric" (at 100 50 0) (effects (hide yes)))
    (pin "1" (uuid "00000000-0000-0000-0000-000000000003"))
    (pin "2" (uuid "00000000-0000-0000-0000-000000000004"))
  )
  (wire
    (pts (xy 90 50) (xy 100 50))
    (stroke (width 0) (type default))
    (uuid "00000000-0000-0000-0000-000000000005")
  )
  (label "NET1"
    (at 90 50 0)
    (effects (font (size 1.27 1.27)))
    (uuid "00000000-0000-0000-0000-000000000006")
  )
  (junction (at 95 50) (diameter 0) (uuid "00000000-0000-0000-0000-000000000007"))
)
"""

# Every element kind, some without identifiers
FULL_SCHEMATIC = """(kicad_sch
  (version 20231120)
  (generator "eeschema")
  (symbol
    (lib_id "Device:C")
    (at 50 60 90)
    (mirror x)
    (unit 2)
    (property "Reference" "C1")
    (property "Value" "100nF")
  )
  (symbol
    (lib_id "power:GND")
    (at 50 80 0)
    (property "Reference" "#PWR01")
    (property "Value" "GND")
  )
  (symbol
    (lib_id "MyLib:PE")
    (at 70 80 180)
    (property "Reference" "#PWR02")
    (property "Value" "Earth")
    (property "power" "")
  )
  (symbol
    (lib_id "power:+3V3")
    (at 30 20 0)
    (property "Reference" "#PWR03")
    (property "Value" "+3V3")
  )
  (wire (pts (xy 0 0) (xy 10 0)))
  (wire (pts (xy 5 5)))
  (label "SDA" (at 10 0 0))
  (global_label "SCL" (shape input) (at 20 0 180))
  (hierarchical_label "RESET" (shape output) (at 30 0 90))
  (junction (at 10 0))
  (no_connect (at 40 40))
  (bus (pts (xy 0 10) (xy 10 10) (xy 10 20)))
  (bus (pts (xy 0 30)))
)
"""

# One R_0603 footprint with two pads, one segment on net 1, one through via
MINIMAL_PCB = """(kicad_pcb
  (version 20231014)
  (generator "pcbnew")
  (general (thickness 1.6))
  (layers
    (0 "F.Cu" signal)
    (31 "B.Cu" signal)
    (36 "B.SilkS" user "B.Silkscreen")
    (37 "F.SilkS" user "F.Silkscreen")
    (44 "Edge.Cuts" user)
  )
  (net 0 "")
  (net 1 "VCC")
  (net 2 "GND")
  (footprint "Resistor_SMD:R_0603"
    (layer "F.Cu")
    (uuid "00000000-0000-0000-0000-0000000000a1")
    (at 100 50 90)
    (fp_text reference "R1" (at 0 -1.5) (layer "F.SilkS"))
    (fp_text value "10k" (at 0 1.5) (layer "F.Fab"))
    (pad "1" smd roundrect (at -0.8 0) (size 0.8 0.95) (layers "F.Cu" "F.Paste" "F.Mask") (net 1 "VCC"))
    (pad "2" smd roundrect (at 0.8 0) (size 0.8 0.95) (layers "F.Cu" "F.Paste" "F.Mask") (net 2 "GND"))
  )
  (segment (start 100 50) (end 110 50) (width 0.25) (layer "F.Cu") (net 1))
  (via (at 110 50) (size 0.6) (drill 0.3) (layers "F.Cu" "B.Cu") (net 1))
)
"""

# Four-point GND zone with solid fill
ZONE_PCB = """(kicad_pcb
  (version 20231014)
  (net 0 "")
  (net 1 "GND")
  (zone
    (net 1)
    (net_name "GND")
    (layer "F.Cu")
    (hatch edge 0.5)
    (connect_pads (clearance 0.5))
    (min_thickness 0.25)
    (fill yes (thermal_gap 0.5) (thermal_bridge_width 0.5))
    (polygon
      (pts (xy 0 0) (xy 50 0) (xy 50 40) (xy 0 40))
    )
  )
)
"""

# Symbol R with its two pins nested inside a per-unit sub-symbol
SYMBOL_LIBRARY = """(kicad_symbol_lib
  (version 20231120)
  (generator "kicad_symbol_editor")
  (symbol "R"
    (pin_numbers hide)
    (pin_names (offset 0))
    (property "Reference" "R" (at 2.032 0 90))
    (property "Value" "R" (at 0 0 90))
    (property "Footprint" "" (at -1.778 0 90))
    (symbol "R_0_1"
      (rectangle (start -1.016 -2.54) (end 1.016 2.54))
    )
    (symbol "R_1_1"
      (pin passive line (at 0 3.81 270) (length 1.27)
        (name "~" (effects (font (size 1.27 1.27))))
        (number "1" (effects (font (size 1.27 1.27))))
      )
      (pin passive line (at 0 -3.81 90) (length 1.27)
        (name "~" (effects (font (size 1.27 1.27))))
        (number "2" (effects (font (size 1.27 1.27))))
      )
    )
  )
)
"""


@pytest.fixture
def minimal_schematic_text() -> str:
    return MINIMAL_SCHEMATIC


@pytest.fixture
def full_schematic_text() -> str:
    return FULL_SCHEMATIC


@pytest.fixture
def minimal_pcb_text() -> str:
    return MINIMAL_PCB


@pytest.fixture
def zone_pcb_text() -> str:
    return ZONE_PCB


@pytest.fixture
def symbol_library_text() -> str:
    return SYMBOL_LIBRARY


@pytest.fixture
def schematic_file(tmp_path):
    """Write the minimal schematic to a temp file."""
    path = tmp_path / "amp.kicad_sch"
    path.write_text(MINIMAL_SCHEMATIC)
    return path


@pytest.fixture
def pcb_file(tmp_path):
    """Write the minimal PCB to a temp file."""
    path = tmp_path / "amp.kicad_pcb"
    path.write_text(MINIMAL_PCB)
    return path


@pytest.fixture
def symbol_library_file(tmp_path):
    """Write the symbol library to a temp file."""
    path = tmp_path / "Device.kicad_sym"
    path.write_text(SYMBOL_LIBRARY)
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run in an empty project with no user config."""
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("hwt_kicad.config.USER_CONFIG_PATH", tmp_path / "no-user-config.toml")
    return tmp_path

from pxr import Gf, Usd, UsdGeom

from usdcheck.checks.geometry import validate_geometry


def _stage():
    return Usd.Stage.CreateInMemory()


def _valid_mesh(stage, path="/World/Cube"):
    mesh = UsdGeom.Mesh.Define(stage, path)
    mesh.CreatePointsAttr([(-1, -1, -1), (1, 1, 1), (1, -1, 1)])
    mesh.CreateExtentAttr([(-1, -1, -1), (1, 1, 1)])
    return mesh


# -------------------------
# Pass cases
# -------------------------

def test_no_geometry_passes_as_optional():
    stage = _stage()
    stage.DefinePrim("/Root", "Scope")
    outcome = validate_geometry(stage)
    assert outcome.passed is True
    assert "No geometry found" in outcome.message
    assert outcome.identifier == "Validate Geometry"


def test_valid_xform_and_mesh_pass():
    stage = _stage()
    world = UsdGeom.Xform.Define(stage, "/World")
    world.AddTranslateOp().Set(Gf.Vec3d(0.0, 1.0, 0.0))
    _valid_mesh(stage)

    outcome = validate_geometry(stage)
    assert outcome.passed is True, outcome.message
    assert outcome.message == "All geometry prims are valid with proper transforms and bounds."


# -------------------------
# Failure cases
# -------------------------

def test_degenerate_extent_fails_with_path():
    stage = _stage()
    mesh = _valid_mesh(stage, "/World/Flat")
    mesh.GetExtentAttr().Set([(2, 2, 2), (2, 2, 2)])

    outcome = validate_geometry(stage)
    assert outcome.passed is False
    assert "Degenerate geometry" in outcome.message
    assert "/World/Flat" in outcome.message


def test_unauthored_extent_and_points_are_reported():
    stage = _stage()
    UsdGeom.Mesh.Define(stage, "/Bare")

    outcome = validate_geometry(stage)
    assert outcome.passed is False
    assert "Invalid extent bounds at: /Bare" in outcome.message
    assert "Invalid point data at: /Bare" in outcome.message


def test_all_issues_are_collected_one_per_line():
    stage = _stage()
    for name in ("A", "B"):
        mesh = _valid_mesh(stage, f"/{name}")
        mesh.GetExtentAttr().Set([(0, 0, 0), (0, 0, 0)])

    outcome = validate_geometry(stage)
    lines = outcome.message.splitlines()
    assert lines[0] == "Geometry validation failed with the following issues:"
    assert lines[1:] == [
        "- Degenerate geometry found at: /A",
        "- Degenerate geometry found at: /B",
    ]


def test_none_stage_fails():
    outcome = validate_geometry(None)
    assert outcome.passed is False
    assert outcome.message == "Invalid stage reference."

from pxr import Usd

from usdcheck.checks import layers as layers_mod
from usdcheck.checks.layers import validate_layer_structure


def _write(path, text):
    path.write_text("#usda 1.0\n" + text, encoding="utf-8")
    return str(path)


# -----------------------------
# Real layer stacks on disk
# -----------------------------

def test_file_stack_with_resolvable_sublayer_passes(tmp_path):
    _write(tmp_path / "mid.usda", 'over "World"\n{\n}\n')
    root = _write(
        tmp_path / "root.usda",
        '(\n    defaultPrim = "World"\n    subLayers = [@./mid.usda@]\n)\n\ndef Xform "World"\n{\n}\n',
    )
    stage = Usd.Stage.Open(root)

    outcome = validate_layer_structure(stage)
    assert outcome.passed is True, outcome.message
    assert outcome.identifier == "Validate Layer Structure"


def test_unresolved_sublayer_in_second_layer_fails(tmp_path):
    _write(
        tmp_path / "mid.usda",
        '(\n    subLayers = [@./missing.usda@]\n)\n\nover "World"\n{\n}\n',
    )
    root = _write(
        tmp_path / "root.usda",
        '(\n    defaultPrim = "World"\n    subLayers = [@./mid.usda@]\n)\n\ndef Xform "World"\n{\n}\n',
    )
    stage = Usd.Stage.Open(root)

    outcome = validate_layer_structure(stage)
    assert outcome.passed is False
    assert "Unresolved sublayer: ./missing.usda" in outcome.message
    assert "Broken external reference in sublayer:" in outcome.message


def test_named_root_layer_without_default_prim_fails(tmp_path):
    root = _write(tmp_path / "root.usda", 'def Xform "World"\n{\n}\n')
    stage = Usd.Stage.Open(root)

    outcome = validate_layer_structure(stage)
    assert outcome.passed is False
    assert "Root layer missing default prim specification" in outcome.message


def test_broken_reference_on_root_prim_fails(tmp_path):
    root = _write(
        tmp_path / "root.usda",
        '(\n    defaultPrim = "World"\n)\n\n'
        'def Xform "World" (\n    prepend references = @./nowhere.usda@\n)\n{\n}\n',
    )
    stage = Usd.Stage.Open(root)

    outcome = validate_layer_structure(stage)
    assert outcome.passed is False
    assert "Broken reference in layer: ./nowhere.usda" in outcome.message


def test_in_memory_stage_passes():
    stage = Usd.Stage.CreateInMemory()
    stage.DefinePrim("/World", "Xform")
    outcome = validate_layer_structure(stage)
    assert outcome.passed is True, outcome.message


# -----------------------------
# Fake layer stacks
# -----------------------------

class _FakeListOp:
    def __init__(self, items=()):
        self.explicitItems = []
        self.prependedItems = list(items)
        self.addedItems = []
        self.appendedItems = []


class _FakeArc:
    def __init__(self, asset_path):
        self.assetPath = asset_path


class _FakePrimSpec:
    def __init__(self, references=(), payloads=()):
        self.referenceList = _FakeListOp(_FakeArc(p) for p in references)
        self.payloadList = _FakeListOp(_FakeArc(p) for p in payloads)


class _FakeLayer:
    def __init__(self, identifier, sublayers=(), root_prims=None, anonymous=True, default_prim=""):
        self.identifier = identifier
        self.subLayerPaths = list(sublayers)
        self.rootPrims = [_FakePrimSpec()] if root_prims is None else list(root_prims)
        self.anonymous = anonymous
        self.defaultPrim = default_prim
        self.external = []

    def GetCompositionAssetDependencies(self):
        return list(self.external)


class _FakeStage:
    def __init__(self, layers):
        self._layers = layers
        self.session_flags = []

    def GetLayerStack(self, includeSessionLayers=True):
        self.session_flags.append(includeSessionLayers)
        return list(self._layers)


def _fake_open_layer(known):
    def _open(asset_path, anchor=None):
        return known.get(asset_path)
    return _open


def test_empty_stack_fails_immediately():
    outcome = validate_layer_structure(_FakeStage([]))
    assert outcome.passed is False
    assert outcome.message == "Layer stack is empty."


def test_null_root_layer_is_a_hard_failure():
    outcome = validate_layer_structure(_FakeStage([None, _FakeLayer("b")]))
    assert outcome.passed is False
    assert outcome.message == "The first layer in the stack is null."


def test_session_layer_is_excluded():
    stage = _FakeStage([_FakeLayer("root")])
    validate_layer_structure(stage)
    assert stage.session_flags == [False]


def test_duplicate_identifier_fails(monkeypatch):
    monkeypatch.setattr(layers_mod, "open_layer", _fake_open_layer({}))
    stage = _FakeStage([_FakeLayer("root"), _FakeLayer("shared"), _FakeLayer("shared")])

    outcome = validate_layer_structure(stage)
    assert outcome.passed is False
    assert outcome.message.count("Duplicate layer identifier found: shared") == 1


def test_null_layer_in_stack_is_reported_and_skipped(monkeypatch):
    monkeypatch.setattr(layers_mod, "open_layer", _fake_open_layer({}))
    stage = _FakeStage([_FakeLayer("root"), None, _FakeLayer("c")])

    outcome = validate_layer_structure(stage)
    assert outcome.passed is False
    assert "- Broken reference at layer index 1" in outcome.message


def test_issue_order_within_and_across_layers(monkeypatch):
    sub = _FakeLayer("sub.usda")
    sub.external = ["gone.usda"]
    monkeypatch.setattr(layers_mod, "open_layer", _fake_open_layer({"sub.usda": sub}))

    layers = [
        _FakeLayer("root"),
        _FakeLayer(
            "root",
            sublayers=["sub.usda", "missing.usda"],
            root_prims=[_FakePrimSpec(references=["ref.usda", ""], payloads=["pay.usda"])],
        ),
        _FakeLayer("dup", root_prims=[]),
    ]
    outcome = validate_layer_structure(_FakeStage(layers))
    assert outcome.passed is False
    assert outcome.message.splitlines()[1:] == [
        "- Duplicate layer identifier found: root",
        "- Broken external reference in sublayer: gone.usda",
        "- Unresolved sublayer: missing.usda",
        "- Broken reference in layer: ref.usda",
        "- Broken payload in layer: pay.usda",
        "- Layer at index 2 has no root prim (possibly a library or session layer).",
    ]


def test_anonymous_root_needs_no_default_prim(monkeypatch):
    monkeypatch.setattr(layers_mod, "open_layer", _fake_open_layer({}))
    outcome = validate_layer_structure(_FakeStage([_FakeLayer("anon", anonymous=True)]))
    assert outcome.passed is True


def test_named_root_with_default_prim_passes(monkeypatch):
    monkeypatch.setattr(layers_mod, "open_layer", _fake_open_layer({}))
    root = _FakeLayer("/assets/root.usda", anonymous=False, default_prim="World")
    outcome = validate_layer_structure(_FakeStage([root]))
    assert outcome.passed is True

## ember — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import json
from pathlib import Path

import pytest

from ember.paths import LoadPath
from ember.runtime import Runtime
from ember.compiler import compile_file, files_to_path, load_artifact, write_artifact
from ember.errors import EmberLoadError, EmberModuleConflict


SOURCE = '@doc "Shapes."\nmodule Shapes\n@doc "Square area."\ndef area(s) = s * s\ndef twice(s) = area(s) * 2\n'


@pytest.fixture
def source(tmp_path: Path) -> str:
    path = tmp_path / "shapes.ex"
    path.write_text(SOURCE, encoding='utf-8')
    return str(path)


def test_compile_file_produces_one_artifact_per_module(source):
    rt = Runtime(load_path=LoadPath())
    [artifact] = compile_file(source, rt)
    assert artifact['module'] == "Shapes"
    assert set(artifact['functions']) == {"area", "twice"}
    assert artifact['docs'] == {"area": "Square area."}
    assert artifact['moduledoc'] == "Shapes."
    assert artifact['file'] == source
    assert artifact['lines'] == {"area": 4, "twice": 5}


def test_compiler_options_strip_docs_and_debug_info(source):
    rt = Runtime(load_path=LoadPath(), compiler_options={'docs': False, 'debug_info': False})
    [artifact] = compile_file(source, rt)
    assert 'docs' not in artifact and 'moduledoc' not in artifact
    assert 'file' not in artifact and 'lines' not in artifact


def test_files_without_modules_produce_nothing(tmp_path):
    path = tmp_path / "script.ex"
    path.write_text("x = 1\n")
    assert compile_file(str(path), Runtime(load_path=LoadPath())) == []


def test_artifacts_load_back_from_the_load_path(source, tmp_path):
    out = tmp_path / "ebin"
    compiled = []
    written = files_to_path([source], str(out), Runtime(load_path=LoadPath()), on_compiled=compiled.append)
    assert written == [str(out / "Shapes.emc")]
    assert compiled == [source]

    fresh = Runtime(load_path=LoadPath([str(out)]))
    assert fresh.eval_string("Shapes.twice(3)") == 18
    assert fresh.modules["Shapes"].docs == {"area": "Square area."}


def test_files_to_path_compiles_in_parallel(tmp_path):
    files = []
    for i in range(6):
        path = tmp_path / f"m{i}.ex"
        path.write_text(f"module Mod{i}\ndef v() = {i}\n")
        files.append(str(path))
    written = files_to_path(files, str(tmp_path / "out"), Runtime(load_path=LoadPath()), max_workers=3)
    assert [Path(w).name for w in written] == sorted(f"Mod{i}.emc" for i in range(6))


def test_files_to_path_reraises_conflicts(tmp_path):
    for name in ("a", "b"):
        (tmp_path / f"{name}.ex").write_text("module Same\n")
    with pytest.raises(EmberModuleConflict):
        files_to_path([str(tmp_path / "a.ex"), str(tmp_path / "b.ex")], str(tmp_path / "out"),
                      Runtime(load_path=LoadPath()))


def test_load_artifact_rejects_bad_files(tmp_path):
    rt = Runtime(load_path=LoadPath())
    broken = tmp_path / "Broken.emc"
    broken.write_text("{not json")
    with pytest.raises(EmberLoadError):
        load_artifact(str(broken), rt)

    old = tmp_path / "Old.emc"
    old.write_text(json.dumps({'version': 0, 'module': 'Old', 'functions': {}}))
    with pytest.raises(EmberLoadError, match="unsupported version"):
        load_artifact(str(old), rt)


def test_write_artifact_names_file_after_module(tmp_path):
    target = write_artifact({'version': 1, 'module': 'A.B', 'functions': {}}, str(tmp_path))
    assert Path(target).name == "A.B.emc"

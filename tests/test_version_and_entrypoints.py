from __future__ import annotations

import importlib


def test_version_string():
    from refcheck_core import __version__
    assert isinstance(__version__, str) and __version__.count(".") >= 1


def _assert_callable(module_path: str, name: str = "run_main"):
    mod = importlib.import_module(module_path)
    fn = getattr(mod, name, None)
    assert callable(fn), f"{name} not callable in {module_path}"


def test_entrypoints_importability():
    _assert_callable("scripts.check_references")
    _assert_callable("scripts.check_references", "main")


def test_package_exports():
    import refcheck_core
    import refcheck_pipeline

    for name in refcheck_core.__all__:
        assert hasattr(refcheck_core, name), name
    for name in refcheck_pipeline.__all__:
        assert hasattr(refcheck_pipeline, name), name

import threading

import pytest

from sfrest import state
from sfrest.state import DEFAULT_API_VERSION, ApiContext


def test_default_version():
    assert DEFAULT_API_VERSION == "39.0"
    assert ApiContext().version == "39.0"
    assert state.get_version() == "39.0"


def test_set_version_persists():
    ctx = ApiContext()
    ctx.set_version("46.0")
    assert ctx.version == "46.0"


def test_use_version_inside_block():
    assert state.get_version() == "39.0"
    with state.use_version("26.0") as v:
        assert v == "26.0"
        assert state.get_version() == "26.0"
    assert state.get_version() == "39.0"


def test_use_version_restores_after_error():
    ctx = ApiContext("41.0")
    with pytest.raises(RuntimeError):
        with ctx.use_version("20.0"):
            assert ctx.version == "20.0"
            raise RuntimeError("boom")
    assert ctx.version == "41.0"


def test_use_version_restores_after_early_return():
    ctx = ApiContext()

    def read_inside():
        with ctx.use_version("20.0"):
            return ctx.version

    assert read_inside() == "20.0"
    assert ctx.version == "39.0"


def test_use_version_nests():
    ctx = ApiContext()
    with ctx.use_version("30.0"):
        with ctx.use_version("31.0"):
            assert ctx.version == "31.0"
        assert ctx.version == "30.0"
    assert ctx.version == "39.0"


def test_set_version_inside_block_is_scoped():
    ctx = ApiContext()
    with ctx.use_version("20.0"):
        ctx.set_version("50.0")
        assert ctx.version == "50.0"
    assert ctx.version == "39.0"


def test_set_version_inside_nested_block_changes_inner_only():
    ctx = ApiContext()
    with ctx.use_version("30.0"):
        with ctx.use_version("31.0"):
            ctx.set_version("52.0")
            assert ctx.version == "52.0"
        assert ctx.version == "30.0"
    assert ctx.version == "39.0"


def test_module_set_version_inside_block_is_scoped():
    with state.use_version("20.0"):
        state.set_version("50.0")
        assert state.get_version() == "50.0"
    assert state.get_version() == "39.0"


def test_override_is_local_to_thread():
    ctx = ApiContext()
    seen = []
    with ctx.use_version("20.0"):
        t = threading.Thread(target=lambda: seen.append(ctx.version))
        t.start()
        t.join()
    assert seen == ["39.0"]


def test_contexts_do_not_share_state():
    a, b = ApiContext(), ApiContext()
    a.set_version("50.0")
    a.record_limit_info({"used": 1, "available": 2})

    assert b.version == "39.0"
    assert b.read_limit_info() == {}


def test_limit_info_empty_until_recorded():
    assert state.read_limit_info() == {}


def test_limit_info_is_overwritten_not_merged():
    ctx = ApiContext()
    ctx.record_limit_info({"used": 1, "available": 100})
    ctx.record_limit_info({"used": 7, "available": 200})
    assert ctx.read_limit_info() == {"used": 7, "available": 200}


def test_read_limit_info_returns_copy():
    ctx = ApiContext()
    ctx.record_limit_info({"used": 1, "available": 100})
    ctx.read_limit_info()["used"] = 999
    assert ctx.read_limit_info() == {"used": 1, "available": 100}

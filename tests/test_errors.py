import pytest

from passmenu.errors import ConfigLoadError, DecodeError, DispatcherStoppedError, PassMenuError
from passmenu.settings import LoadResult


def test_decode_error_wraps_exception() -> None:
    try:
        raise ValueError("bad yaml")
    except ValueError as e:
        err = DecodeError("Could not parse", original_error=e)
        assert str(err) == "Could not parse"
        assert err.message == "Could not parse"
        assert err.original_error is e


def test_decode_error_without_cause() -> None:
    err = DecodeError("Empty")
    assert err.original_error is None


@pytest.mark.parametrize("result", [LoadResult.NEEDS_UPGRADE, LoadResult.FILE_CREATION_FAILURE])
def test_config_load_error_names_outcome(result: LoadResult) -> None:
    err = ConfigLoadError(result, "/tmp/passmenu.yaml")
    assert err.result is result
    assert err.path == "/tmp/passmenu.yaml"
    assert str(err) == f"Could not load configuration file /tmp/passmenu.yaml ({result.name})"


def test_config_load_error_detail() -> None:
    err = ConfigLoadError(LoadResult.NEEDS_UPGRADE, "cfg.yaml", "default is outdated")
    assert str(err).endswith(": default is outdated")


@pytest.mark.parametrize(
    "err",
    [
        DecodeError("x"),
        ConfigLoadError(LoadResult.FILE_CREATION_FAILURE, "x"),
        DispatcherStoppedError("x"),
    ],
)
def test_all_errors_share_base(err: Exception) -> None:
    assert isinstance(err, PassMenuError)

"""Tests for switchyard.__init__ — lazy import registry covers all public names."""

import pytest

import switchyard


@pytest.mark.parametrize("name", switchyard.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(switchyard, name)
    assert obj is not None, f"switchyard.{name} resolved to None"


def test_all_names_in_lazy_registry() -> None:
    """Every name in __all__ has a corresponding entry in _LAZY_IMPORTS."""
    missing = set(switchyard.__all__) - set(switchyard._LAZY_IMPORTS)
    assert not missing, f"Names in __all__ but not in _LAZY_IMPORTS: {sorted(missing)}"


def test_lazy_registry_no_extras() -> None:
    """Every name in _LAZY_IMPORTS should be in __all__ (public API contract)."""
    extras = set(switchyard._LAZY_IMPORTS) - set(switchyard.__all__)
    assert not extras, f"Names in _LAZY_IMPORTS but not in __all__: {sorted(extras)}"


def test_unknown_name_raises() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        _ = switchyard.does_not_exist  # type: ignore[attr-defined]


def test_version() -> None:
    assert switchyard.__version__ == "0.1.0"

'''
General tests for import behavior of the sparse_lanczos package.

Ensures that submodules are lazily imported and key exports are available.

Tests:
- Lazy loading of subpackages
- Key class/function exports
- Package metadata presence

File        : tests/test_imports.py
'''

import types
import pytest

# -------------------------------------------------------------------

def test_root_imports_lazy():
    import sparse_lanczos as sl
    # Accessing attribute should trigger lazy import
    algebra = sl.algebra
    assert isinstance(algebra, types.ModuleType)
    assert algebra.__name__ == "sparse_lanczos.algebra"

# -------------------------------------------------------------------

def test_root_exports():
    import sparse_lanczos as sl
    from sparse_lanczos.algebra.eigen.lanczos import LanczosEigensolver
    assert sl.LanczosEigensolver is LanczosEigensolver
    assert callable(sl.as_operator)
    assert callable(sl.get_global_logger)

# -------------------------------------------------------------------

def test_eigen_exports():
    from sparse_lanczos.algebra import eigen
    for name in eigen.__all__:
        assert getattr(eigen, name) is not None, name

def test_algebra_lazy_submodule():
    from sparse_lanczos import algebra
    assert isinstance(algebra.eigen, types.ModuleType)
    assert algebra.get_logger is not None

def test_unknown_attribute():
    import sparse_lanczos as sl
    with pytest.raises(AttributeError):
        sl.does_not_exist

# -------------------------------------------------------------------

def test_package_metadata():
    import sparse_lanczos as sl
    assert hasattr(sl, "__version__")

# -------------------------------------------------------------------
#! End of file
# ----------------------------------------------------------------------

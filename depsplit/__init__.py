"""
depsplit - split a Python module by the imports its functions use

Functions that use the same set of imported namespaces are moved together into
their own module; a reassembled entry file re-exports them and keeps the
program's entry function.
"""

__version__ = "0.1.0"

# Only expose version by default - everything else is lazy loaded
__all__ = ["__version__"]


def __getattr__(name):
    """Lazy loading of main API classes to keep ``import depsplit`` cheap."""
    if name in {"DependencySplitter", "SplitResult"}:
        from .splitting import DependencySplitter, SplitResult
        return {
            "DependencySplitter": DependencySplitter,
            "SplitResult": SplitResult,
        }[name]

    if name in {"DepSplitConfig", "load_config"}:
        from .config import DepSplitConfig, load_config
        return {
            "DepSplitConfig": DepSplitConfig,
            "load_config": load_config,
        }[name]

    if name == "SplitterError":
        from .errors import SplitterError
        return SplitterError

    raise AttributeError(f"module 'depsplit' has no attribute '{name}'")

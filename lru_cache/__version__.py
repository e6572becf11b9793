"""Package version.

Resolved from the installed distribution metadata of ``lru-cache``; a source
checkout that was never installed reads ``project.version`` straight from
``pyproject.toml`` instead.
"""

try:
    from importlib.metadata import version

    __version__ = version("lru-cache")
except Exception:
    # Fallback for development (package not installed)
    # Read directly from pyproject.toml
    import tomllib
    from pathlib import Path

    try:
        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomllib.load(f)
            __version__ = pyproject["project"]["version"]
    except Exception:
        # Last resort fallback
        __version__ = "0.0.0-dev"

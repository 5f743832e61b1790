"""Path helpers for separating manifests from data files."""

from pathlib import Path
from typing import Optional, Sequence

DEFAULT_MANIFEST_EXTENSION = ".sfv"
DEFAULT_MANIFEST_NAME = "checksums.sfv"


def basename(path: Path | str) -> str:
    """Return the last path component, the key used for manifest lookups.
    
    Args:
        path: Path object or string
        
    Returns:
        Final component of the path (e.g., "file1.txt")
    """
    return Path(path).name


def extension(path: Path | str) -> str:
    """Return the lowercase extension including the dot, or "" when absent."""
    return Path(path).suffix.lower()


def normalize_extension(ext: str) -> str:
    """Normalize an extension to lowercase with a leading dot.
    
    Examples:
        >>> normalize_extension("SFV")
        '.sfv'
        >>> normalize_extension(".Sfv")
        '.sfv'
    """
    ext = ext.strip().lower()
    if ext and not ext.startswith('.'):
        ext = '.' + ext
    return ext


def is_manifest_path(path: Path | str, manifest_extension: str = DEFAULT_MANIFEST_EXTENSION) -> bool:
    """Check whether a path names an SFV manifest (case-insensitive extension)."""
    return extension(path) == normalize_extension(manifest_extension)


def default_manifest_path(
    data_paths: Sequence[Path | str],
    manifest_name: str = DEFAULT_MANIFEST_NAME,
) -> Optional[Path]:
    """Suggest where a new manifest should be saved.
    
    The manifest goes next to the first data file.
    
    Args:
        data_paths: Data file paths in input order
        manifest_name: File name of the manifest
        
    Returns:
        Suggested manifest path, or None when there are no data paths
    """
    if not data_paths:
        return None
    return Path(data_paths[0]).parent / manifest_name


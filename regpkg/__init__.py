"""
regpkg - Registered packages database tools

Read-only inspection of the registered packages database, featuring:
- Orphan detection (automatic installs nobody requires anymore)
- Compressed registry support (zstd, gzip, xz, bzip2)
- Modern CLI with short aliases
"""

__version__ = "0.1.0"
__author__ = "regpkg contributors"

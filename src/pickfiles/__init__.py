"""
pickfiles - interactively pick files by extension and copy them.

This package walks a source directory tree, finds files ending with a given
extension, shows a short preview of each one and lets the user decide, file
by file, whether it gets copied (flattened, by name) into a target directory.
"""

__version__ = "0.1.0"
__author__ = "pickfiles team"

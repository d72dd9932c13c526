"""
Page Mirror - save a single web page and its images for offline viewing.

This package fetches one page, downloads every image it references,
rewrites the image references to the local copies and stores the result
in a per-host folder.
"""

__version__ = "1.0.0"
__author__ = "Page Mirror Team"

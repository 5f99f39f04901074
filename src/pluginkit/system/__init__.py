"""System domain package.

This package contains file system helpers:
- path_utils: unique path allocation, reading, writing and deleting files
"""

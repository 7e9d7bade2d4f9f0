"""
userstore

REST resource manager for user records backed by a key-value style table.
"""

__version__ = "0.1.0"

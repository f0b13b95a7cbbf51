"""
wallfetch - fetch wallpapers from configurable image suppliers.
"""

__version__ = "0.1.0"

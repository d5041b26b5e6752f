# site_shot/__init__.py
"""
SiteShot package initializer.
Defines package version; the CLI lives in :mod:`site_shot.cli`.
"""
__version__ = "0.1.0"

"""
Declutter - reconcile Android system packages with curated debloat lists.

Combines the live package state of an ADB-connected device with an
offline classification database to help decide which system packages
to disable, enable or remove, and exports backups and selections of
those packages.
"""

__version__ = "0.1.0"
__author__ = "Declutter Contributors"

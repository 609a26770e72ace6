"""
Top-level package for the cell-type comparison browser.

This package exposes the state synchronization engine (domain, services) and
the Dash UI adapter. Most code should import from submodules such as:
    ct_browser.core
    ct_browser.services
    ct_browser.ui
"""

__all__: list[str] = []

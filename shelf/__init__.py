"""Shelf - Library Catalog Package

This package contains the core application modules:
- Record models (book.py, member.py)
- Catalog management logic (library.py)
- Operation results (result.py)
- Flat-file persistence (storage.py)
- Settings (config.py)
- Shell helpers (ui_helpers.py, validators.py)
"""

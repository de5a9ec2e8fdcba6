"""Validators for extracted libdef data."""

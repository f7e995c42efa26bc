"""Utility helpers for pocket-todo."""

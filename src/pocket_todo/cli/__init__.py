"""Command-line interface package for pocket-todo."""

__all__ = ["main"]


def main(*args, **kwargs):
    """Entry point that defers imports until needed."""
    from .tasks import main as tasks_main

    return tasks_main(*args, **kwargs)

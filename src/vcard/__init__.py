"""vCard output."""

from .serializer import render_card, serialize

__all__ = [
    "render_card",
    "serialize",
]

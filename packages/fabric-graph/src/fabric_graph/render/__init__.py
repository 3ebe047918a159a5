from .fabric_diagram import render_layout

__all__ = ["render_layout"]

"""State/store layer.

This package is the single source of truth for a parameter's value. The
initial parameters, the live URL at mount time, back/forward navigation
and programmatic writes all land here through one write entry point.
"""

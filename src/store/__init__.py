"""Particle container layer.

This package owns the output container lifecycle, particle emission,
and the libmcpl-backed MCPL writer and its read-back checks.
"""

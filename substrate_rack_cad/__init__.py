"""Parametric CAD for an AOCL substrate rack, single-substrate holder, and storage box."""

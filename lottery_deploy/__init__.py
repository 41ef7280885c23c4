"""Deployment and test scaffolding for the VRF-driven Lottery contract."""

__version__ = "0.1.0"

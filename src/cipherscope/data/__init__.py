"""Packaged reference corpora."""

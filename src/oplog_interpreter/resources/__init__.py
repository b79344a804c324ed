"""Bundled resources distributed with the operation log interpreter."""

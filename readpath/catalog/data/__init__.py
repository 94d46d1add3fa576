"""Bundled catalog resources."""

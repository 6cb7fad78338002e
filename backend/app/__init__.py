"""Mosaic backend application."""

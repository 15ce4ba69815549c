"""Kinship: a personal relationship manager API."""

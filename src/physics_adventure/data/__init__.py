"""Scenario catalog data."""

"""Helpers shared by routes and services."""

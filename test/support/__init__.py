"""Shared models and revision files for the appdb test suite."""

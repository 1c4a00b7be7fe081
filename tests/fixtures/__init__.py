"""Shared test fixtures for SysLibKit."""

"""Shared logging and threading helpers."""

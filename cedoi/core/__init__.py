"""Configuration, security and shared helpers."""

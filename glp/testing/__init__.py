"""Helpers for building GitLab payloads and models in tests."""

"""Data models for GitLab API payloads and display rows."""

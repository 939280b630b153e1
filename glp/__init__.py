"""GitLab pipeline status for the command line."""

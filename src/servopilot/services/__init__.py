"""Service layer for servopilot."""

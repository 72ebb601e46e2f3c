"""Synchronizes the TC39 proposals dataset with issues in a Jira project."""

"""Configuration and logging setup shared by the command-line tools."""

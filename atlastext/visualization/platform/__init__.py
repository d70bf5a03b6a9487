"""Platform-specific backend glue."""

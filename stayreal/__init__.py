"""Session and authentication manager for the StayReal client."""

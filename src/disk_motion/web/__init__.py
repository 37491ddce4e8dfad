"""Browser-facing JSON API for the disk scheduling simulator."""

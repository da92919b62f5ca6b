"""Command line interface for AttendQL."""

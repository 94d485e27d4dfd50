"""External providers used by the session core."""

"""Database engine and sessions, request correlation, Redis notifications."""

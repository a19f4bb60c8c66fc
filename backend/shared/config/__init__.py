"""Settings, structured logging and domain constants."""

"""JWT authentication, bcrypt passwords and login rate limiting."""

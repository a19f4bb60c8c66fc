"""Exceptions, validators and API schemas."""

"""Request, response and event schemas."""

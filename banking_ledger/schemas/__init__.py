"""Request, response, and view schemas."""

"""ASGI glue: request handling, response sending and error responses."""

"""Server — the ASGI request pipeline, error handlers, and the api map."""

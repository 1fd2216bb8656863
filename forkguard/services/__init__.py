"""Business-level services: the cookie codec and the session orchestrator."""

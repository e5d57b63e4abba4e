"""Service layer: collaborators and use cases the routers call into."""

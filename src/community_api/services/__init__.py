"""Service layer: business logic over the async database session."""

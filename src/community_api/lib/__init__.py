"""Pure libraries with no database or HTTP framework dependencies."""

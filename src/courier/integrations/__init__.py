"""Entity mappers for commonly used serialization formats."""

"""Infrastructure: engine wiring, repositories and the storage provider."""

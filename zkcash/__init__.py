"""zkcash swap proxy backend."""

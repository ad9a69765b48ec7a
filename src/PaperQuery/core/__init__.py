"""Domain core: entity kinds, filter aliases and response slimming."""

"""Entity package used by the discovery tests."""

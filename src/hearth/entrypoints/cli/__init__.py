"""The ``hearth`` command-line interface."""

"""Hearth test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- integration/  : Full bootstrap of a project against a real SQLite database.
- e2e/          : The ``hearth`` CLI invoked through Click's test runner.
- fixtures/     : Shared fixtures and fixture packages (no tests here).

General guidance
- Keep unit tests fast and deterministic; temporary directories are fine.
- Never depend on the developer's real environment: the process environment
  is isolated for every test (see ``tests/conftest.py``).
"""

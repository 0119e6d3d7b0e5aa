"""Hearth

An application bootstrapper for Python web applications. It loads layered
environment files, builds the runtime collaborators of a request (template
engine, mailer, ORM session, logger, routing and caches) and exposes them
through a single `Application` facade.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

"""Database adapters: engine factory, shared metadata and entity discovery."""

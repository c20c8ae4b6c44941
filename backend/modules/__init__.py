"""
Feature modules for the Tribunal backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- exceptions.py: Module-specific exceptions

and, where it has them, a service.py and routes.py. Modules communicate
through interfaces, not concrete implementations.
"""

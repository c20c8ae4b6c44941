"""
Tribunal API package.

Provides the FastAPI application for the Tribunal jury debate service.
The application instance lives in api.app.
"""

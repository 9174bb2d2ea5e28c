"""
ASGI entrypoint: uvicorn api_envelope.main:app
"""

from api_envelope.app import create_app

app = create_app()

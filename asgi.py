"""
asgi.py -- ASGI entry point for the Inventory API.

Run with:  uvicorn asgi:app --reload
           python main.py

Settings come from the environment / .env via get_settings().
"""

from api.main import create_app

app = create_app()

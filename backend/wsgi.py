# backend/wsgi.py
from plantmarket import create_app

app = create_app()

# onboarding_api/wsgi.py
from onboarding_api import create_app

app = create_app()

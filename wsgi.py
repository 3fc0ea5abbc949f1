#!/usr/bin/env python3
"""
WSGI entry point for the SOAR Playbook Converter service
"""
print("🔧 WSGI: Starting import process", flush=True)

try:
    from src.main import app
    print("🔧 WSGI: Successfully imported Flask app", flush=True)
except Exception as e:
    print(f"❌ WSGI: Failed to import src.main: {e}", flush=True)
    import traceback
    traceback.print_exc()
    raise

# Configure for production
app.config['ENV'] = 'production'
app.config['DEBUG'] = False

# WSGI application
application = app

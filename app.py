#!/usr/bin/env python3
"""
Deployment entry point for the SOAR Playbook Converter service
"""
import os

# Import the Flask app
from src.main import app

# Configure for deployment
app.config['ENV'] = 'production'
app.config['DEBUG'] = False

PORT = int(os.environ.get('PORT', 5000))

if __name__ == "__main__":
    print("🚀 Starting SOAR Playbook Converter...")
    print(f"📊 Running on port {PORT}")

    app.run(
        host='0.0.0.0',
        port=PORT,
        debug=False,
        threaded=True
    )

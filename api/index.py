"""
Serverless entry point for Prompt Relay.
Vercel serves the ASGI ``app``; Lambda-style platforms (Netlify, AWS) call ``handler``.
"""

import os
import sys

from mangum import Mangum

# Add the project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from main import app  # noqa: E402

# Create Mangum handler for serverless deployment
handler = Mangum(app, lifespan="off")

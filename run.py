#!/usr/bin/env python3
"""
RWA Core Entry Point

Starts the FastAPI server with the fractional ownership core.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from rwa_core.api import run_server
from rwa_core.config import get_config


if __name__ == "__main__":
    settings = get_config()
    print("Starting RWA Core...")
    print(f"Storage: {settings.database_url}")
    print(f"Settlement currency: {settings.settlement_symbol}")
    print(f"API available at: http://localhost:{settings.api_port}")
    print(f"Documentation at: http://localhost:{settings.api_port}/docs")
    print()

    try:
        run_server(debug="--reload" in sys.argv)
    except KeyboardInterrupt:
        print("\nShutting down RWA Core...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)

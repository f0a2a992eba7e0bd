"""
Nomadfolio Starter App
======================

A ready-to-run portfolio API with every module enabled. Settings come from
the environment (or a .env file next to where you run it).

Run with:
    python app.py

Visit:
    http://localhost:5000/api/health           - Health check
    http://localhost:5000/api/projects/public  - Public portfolio
"""

from nomadfolio import create_app
from nomadfolio.core.config import Config

app = create_app()


if __name__ == '__main__':
    prefix = app.config['API_PREFIX']
    print("\n" + "=" * 60)
    print("Nomadfolio")
    print("=" * 60)
    print(f"Health:          http://localhost:{Config.port}{prefix}/health")
    print(f"Public projects: http://localhost:{Config.port}{prefix}/projects/public")
    print(f"Identity:        {app.config['IDENTITY_PROVIDER']}")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=Config.DEBUG)

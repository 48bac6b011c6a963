"""Run the catalog API on Flask's development server: ``python -m api``."""
import os

from . import create_app

app = create_app()

if __name__ == "__main__":
    app.run(
        host=os.getenv("CATALOG_HOST", "127.0.0.1"),
        port=int(os.getenv("CATALOG_PORT", "5000")),
        debug=app.config.get("DEBUG", False),
    )

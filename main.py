"""Local development server.

Reads `.env`, then serves the API on http://127.0.0.1:8000.
"""

import os

from studio_bingo import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.getenv("PORT", "8000")), debug=app.config.get("DEBUG", False))

from __future__ import annotations

import os

from alephcode.factory import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    debug = os.getenv("FLASK_DEBUG", "true").lower() in {"1", "true", "yes", "y", "on"}
    app.run(host="0.0.0.0", port=port, debug=debug)

"""
Entry point: serve the DriftGuard engine on the loopback API the browser
extension talks to (http://127.0.0.1:8765 unless overridden).

Usage:
    driftguard                      # console script installed by pip
    python -m driftguard.main
    DG_API_PORT=9000 driftguard     # any Config field via DG_<FIELD>

Durable state lives in data/state.json; scoring runs every
scoring_interval_ms and score decay every decay_interval_ms.
"""

import uvicorn
from .config import config


def main():
    uvicorn.run(
        "driftguard.api.app:app",
        host=config.api_host,
        port=config.api_port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()

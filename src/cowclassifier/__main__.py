"""Run the CowClassifier API server: ``python -m cowclassifier``."""

from __future__ import annotations

import uvicorn

from cowclassifier.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "cowclassifier.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

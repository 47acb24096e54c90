from __future__ import annotations

import uvicorn

from zoneworld.config import settings


def main() -> None:
    uvicorn.run(
        "zoneworld.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

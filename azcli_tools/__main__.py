"""Run the API with uvicorn: ``python -m azcli_tools``."""

from __future__ import annotations

import uvicorn

from azcli_tools.config import settings


def main() -> None:
    uvicorn.run(
        "azcli_tools.main:app",
        host=settings.listen_host,
        port=settings.listen_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

from __future__ import annotations

import uvicorn

from antiptrn_core.app import create_app
from antiptrn_core.config import load_core_config, resolve_bind
from antiptrn_core.logging_setup import configure_logging


def main() -> None:
    config = load_core_config()
    configure_logging(config.logging)

    host, port = resolve_bind(config)

    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()

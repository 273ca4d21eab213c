from __future__ import annotations

import uvicorn

from omnilearn import config


def main() -> None:
    uvicorn.run("omnilearn.api:app", host="0.0.0.0", port=config.port(), log_level="info")


if __name__ == "__main__":
    main()

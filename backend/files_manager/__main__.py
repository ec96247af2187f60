"""Run the API with uvicorn: ``python -m files_manager``."""

import uvicorn

from files_manager.config import get_settings


def main() -> None:
    uvicorn.run("files_manager.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    main()

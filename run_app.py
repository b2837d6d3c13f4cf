import os

import uvicorn

from ipapi_geo.logger import build_log_config, resolve_log_level


def main() -> None:
    """Run the FastAPI application with uvicorn. HOST, PORT and LOG_LEVEL come from the environment."""
    uvicorn.run(
        "ipapi_geo.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_config=build_log_config(resolve_log_level()),
    )


if __name__ == "__main__":
    main()

import os

import uvicorn

from api.app import API_BASE_PATH, create_app
from utils.logger import get_logger, log_level

_logger = get_logger("server")

PORT = int(os.getenv("PORT", "3001"))

ENDPOINTS = [
    "GET    /users",
    "GET    /posts",
    "GET    /products",
    "GET    /categories",
    "GET    /comments",
    "GET    /users/:id/posts",
    "GET    /posts/:id/comments",
    "GET    /products/category/:category",
    "GET    /search?q=query",
    "POST   /auth/login",
    "POST   /auth/register",
]


def main() -> None:
    app = create_app()
    _logger.info(f"Record store listening on http://localhost:{PORT}")
    for endpoint in ENDPOINTS:
        method, path = endpoint.split(maxsplit=1)
        _logger.info(f"  {method:<6} {API_BASE_PATH}{path}")
    uvicorn.run(app, host="0.0.0.0", port=PORT, log_level=log_level())


if __name__ == "__main__":
    main()

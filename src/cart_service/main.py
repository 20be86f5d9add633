from __future__ import annotations

import uvicorn

from cart_service.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "cart_service.asgi:create_asgi_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()

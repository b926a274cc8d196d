import uvicorn

from joke_api.server.core.config import settings


def main() -> None:
    uvicorn.run("joke_api.server.main:app", host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()

import uvicorn

from costura.config import Settings


def main():
    settings = Settings.from_env()
    uvicorn.run("costura.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

import uvicorn

from demo_router.core.app_factory import create_app

app = create_app()


def run() -> None:
    """Serve ``app`` with uvicorn (``demo-router`` console script)."""
    uvicorn.run("demo_router.main:app", host="0.0.0.0", port=8000, proxy_headers=True)


if __name__ == "__main__":
    run()

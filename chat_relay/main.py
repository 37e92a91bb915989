from chat_relay.core.app_factory import create_app

app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "chat_relay.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "5000")),
    )

import os

from wanderlust import create_app

app = create_app()


if __name__ == "__main__":
    port = int(os.getenv("PORT") or 8080)
    app.logger.info("app_listening port=%s", port)
    app.run(host="0.0.0.0", port=port)

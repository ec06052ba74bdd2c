import logging
import os

from flask import Flask

from zkmm.config import GameConfig

from mastermind_routes import mastermind_bp


def create_app(game_config=None):
    app = Flask(__name__)
    app.config["GAME_CONFIG"] = game_config or GameConfig.from_env()
    app.register_blueprint(mastermind_bp)
    return app


app = create_app()

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("ZKMM_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(host=os.environ.get("ZKMM_HOST", "127.0.0.1"), port=int(os.environ.get("ZKMM_PORT", "5000")))

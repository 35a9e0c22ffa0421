import sys

from flask import Flask

from canvas_babel.api.routes import bp as api_bp
from canvas_babel.config import settings
from canvas_babel.utils.logger import setup_logger

app = Flask(__name__)
app.register_blueprint(api_bp)


if __name__ == "__main__":
    setup_logger()
    port = settings.PORT
    if "--port" in sys.argv:
        try:
            i = sys.argv.index("--port")
            port = int(sys.argv[i+1])
        except (IndexError, ValueError):
            print("[CanvasBabel] --port expects an integer, using", port)
    print(f"[CanvasBabel] running at http://{settings.HOST}:{port}")
    app.run(host=settings.HOST, port=port, debug=False)

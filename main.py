"""Color sandbox web app (Flask).

Serves one interactive color session as a JSON API: the current color with
its RGB/HSL sliders, a 2D picker with six axis pairings, a harmony wheel,
value tables, randomized nearby swatches, and a color quiz.

Usage
-----
$ pip install -e .
$ python main.py                      # starts on http://127.0.0.1:5000
$ COLOR_SANDBOX_CONFIG=sandbox.yaml python main.py
"""

from __future__ import annotations

import argparse

from color_sandbox.app import create_app
from color_sandbox.config import load_config


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the color sandbox server.")
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    app = create_app(load_config(args.config))
    # threaded is fine: create_app serializes access to the session
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
import threading
from typing import Any

from flask import Flask, jsonify, request

from .colormodel import InvalidColorValue, parse_color_text, parse_hex
from .config import SandboxConfig, load_config
from .display import RecordingDisplay, encode_pixels
from .harmony import render_wheel
from .quiz import QuizStateError
from .session import SandboxSession

log = logging.getLogger(__name__)


def _body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object body")
    return data


def _field(data: dict[str, Any], name: str) -> Any:
    if name not in data:
        raise ValueError(f"missing field '{name}'")
    return data[name]


def _number(data: dict[str, Any], name: str) -> float:
    try:
        return float(_field(data, name))
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be a number") from None


def _index(data: dict[str, Any]) -> int:
    try:
        return int(_field(data, "index"))
    except (TypeError, ValueError):
        raise ValueError("'index' must be an integer") from None


def _result(result) -> dict[str, Any]:
    return {
        "correct": result.correct,
        "round_over": result.round_over,
        "message": result.message,
        "distance": result.distance,
        "actual": result.actual,
        "hint": result.hint,
    }


# ----------------------------- Flask app ----------------------------------


def create_app(
    config: SandboxConfig | None = None,
    session: SandboxSession | None = None,
) -> Flask:
    app = Flask(__name__)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config = config or load_config()
    if session is None:
        session = SandboxSession(RecordingDisplay(), config=config)
    display = session.display
    # one session, one writer at a time
    lock = threading.Lock()
    app.config["SANDBOX_SESSION"] = session

    def state() -> dict[str, Any]:
        out = session.snapshot()
        if isinstance(display, RecordingDisplay):
            out["display"] = display.state
        return out

    def run(action, *, payload=None):
        """Apply `action` under the session lock and answer with fresh state."""
        try:
            with lock:
                session.poll()
                result = action()
                body = state()
        except (InvalidColorValue, ValueError, KeyError, IndexError) as exc:
            return jsonify({"error": str(exc)}), 400
        except QuizStateError as exc:
            return jsonify({"error": str(exc)}), 409
        except Exception as exc:
            log.exception("request failed")
            return jsonify({"error": str(exc)}), 500
        if payload is not None:
            body[payload] = result
        return jsonify(body)

    @app.route("/state")
    def get_state():
        return run(lambda: None)

    @app.route("/color", methods=["POST"])
    def set_color():
        def action():
            data = _body()
            if "rgb" in data:
                session.update_rgb(*_triple(data["rgb"]))
            elif "hsl" in data:
                session.update_hsl(*_triple(data["hsl"]))
            elif "hex" in data:
                session.set_color(parse_hex(str(data["hex"])))
            elif "text" in data:
                session.set_color(parse_color_text(str(data["text"])))
            else:
                raise ValueError("expected one of rgb, hsl, hex, text")

        return run(action)

    @app.route("/slider", methods=["POST"])
    def slider():
        def action():
            data = _body()
            session.slider_change(str(_field(data, "channel")), _field(data, "value"))

        return run(action)

    # ---- picker ----

    @app.route("/picker/mode", methods=["POST"])
    def picker_mode():
        return run(lambda: session.set_picker_mode(_field(_body(), "mode")))

    @app.route("/picker/move", methods=["POST"])
    def picker_move():
        def action():
            data = _body()
            session.pointer_move_picker(_number(data, "x"), _number(data, "y"))

        return run(action)

    @app.route("/picker/fixed", methods=["POST"])
    def picker_fixed():
        return run(lambda: session.set_picker_fixed(_field(_body(), "value")))

    @app.route("/picker/field")
    def picker_field():
        if not isinstance(display, RecordingDisplay):
            return jsonify({"error": "display does not keep pixel buffers"}), 404
        with lock:
            payload = display.picker_field_payload()
        if payload is None:
            return jsonify({"error": "picker field not rendered yet"}), 404
        return jsonify(payload)

    # ---- harmony ----

    @app.route("/harmony/mode", methods=["POST"])
    def harmony_mode():
        return run(lambda: session.set_harmony_mode(_field(_body(), "mode")))

    @app.route("/harmony/wheel-mode", methods=["POST"])
    def wheel_mode():
        return run(lambda: session.set_wheel_mode(_field(_body(), "mode")))

    @app.route("/harmony/fixed", methods=["POST"])
    def harmony_fixed():
        return run(lambda: session.set_harmony_fixed(_field(_body(), "value")))

    @app.route("/harmony/select", methods=["POST"])
    def harmony_select():
        return run(lambda: session.select_harmony(_index(_body())))

    @app.route("/wheel/move", methods=["POST"])
    def wheel_move():
        def action():
            data = _body()
            session.pointer_move_wheel(_number(data, "x"), _number(data, "y"))

        return run(action)

    @app.route("/wheel/field")
    def wheel_field():
        size = config.wheel_size
        with lock:
            pixels = render_wheel(session.wheel_mode, session.color, size)
        if pixels is None:
            return jsonify({"error": "wheel size is zero"}), 404
        return jsonify({"width": size, "height": size, "rgba": encode_pixels(pixels)})

    # ---- nearby ----

    @app.route("/nearby/resize", methods=["POST"])
    def nearby_resize():
        return run(lambda: session.resize_nearby(_number(_body(), "width")))

    @app.route("/nearby/select", methods=["POST"])
    def nearby_select():
        return run(lambda: session.select_nearby(_index(_body())))

    # ---- quiz ----

    @app.route("/quiz")
    def quiz_state():
        with lock:
            return jsonify(session.quiz.snapshot())

    @app.route("/quiz/mode", methods=["POST"])
    def quiz_mode():
        def action():
            data = _body()
            session.start_quiz(
                _field(data, "mode"),
                code_format=data.get("code_format"),
                slider_format=data.get("slider_format"),
                channel_format=data.get("channel_format"),
            )

        return run(action)

    @app.route("/quiz/next", methods=["POST"])
    def quiz_next():
        return run(session.next_round)

    @app.route("/quiz/option", methods=["POST"])
    def quiz_option():
        return run(lambda: _result(session.choose_option(_index(_body()))), payload="result")

    @app.route("/quiz/slider", methods=["POST"])
    def quiz_slider():
        def action():
            data = _body()
            values = _triple(_field(data, "values"))
            fmt = str(data.get("format") or session.quiz.slider_format)
            return _result(session.submit_slider_guess(fmt, *values))

        return run(action, payload="result")

    @app.route("/quiz/channel", methods=["POST"])
    def quiz_channel():
        return run(
            lambda: _result(session.submit_channel_guess(_field(_body(), "guess"))),
            payload="result",
        )

    return app


def _triple(values: Any) -> list[Any]:
    if not isinstance(values, (list, tuple)) or len(values) != 3:
        raise ValueError("expected a list of three values")
    return list(values)

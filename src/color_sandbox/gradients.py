"""Background gradients for the channel sliders, as CSS gradient specs."""

from __future__ import annotations

from .colormodel import Color


def linear_gradient(stops: list[str]) -> str:
    return f"linear-gradient(to right, {', '.join(stops)})"


def channel_gradient(channel: str, color: Color) -> str:
    """Gradient for the slider of `channel` given the rest of `color`."""
    r, g, b, h, s, l = color.r, color.g, color.b, color.h, color.s, color.l
    if channel == "r":
        stops = [f"rgb(0, {g}, {b})", f"rgb(255, {g}, {b})"]
    elif channel == "g":
        stops = [f"rgb({r}, 0, {b})", f"rgb({r}, 255, {b})"]
    elif channel == "b":
        stops = [f"rgb({r}, {g}, 0)", f"rgb({r}, {g}, 255)"]
    elif channel == "h":
        stops = [f"hsl({deg}, {s}%, {l}%)" for deg in range(0, 361, 60)]
    elif channel == "s":
        stops = [f"hsl({h}, 0%, {l}%)", f"hsl({h}, 100%, {l}%)"]
    elif channel == "l":
        stops = [f"hsl({h}, {s}%, 0%)", f"hsl({h}, {s}%, 50%)", f"hsl({h}, {s}%, 100%)"]
    else:
        raise KeyError(f"unknown channel '{channel}'")
    return linear_gradient(stops)


def slider_gradients(color: Color) -> dict[str, str]:
    return {ch: channel_gradient(ch, color) for ch in ("r", "g", "b", "h", "s", "l")}


__all__ = ["channel_gradient", "linear_gradient", "slider_gradients"]

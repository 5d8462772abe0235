"""Board palette and color utilities for the UI."""


class BoardColors:
    """Flat palette for the board painter and header."""

    BACKGROUND = "#e0f7fa"
    FLOOR = "#f8fcfd"
    GRID_LINE = "#e6f0f0"

    WALL = "#455a64"
    WALL_EDGE = "#263238"

    TARGET = "#ff8a65"
    CRATE = "#ffb74d"
    CRATE_EDGE = "#8d6e63"
    CRATE_ON_TARGET = "#69f0ae"

    PLAYER = "#00838f"
    PLAYER_EYE = "#ffffff"

    TEXT_PRIMARY = "#1a3a3a"
    TEXT_MUTED = "#78909c"
    WON = "#107878"
    LOST = "#c62828"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    t = max(0.0, min(1.0, float(t)))
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"

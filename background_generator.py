from image_utils import even_stops, linear_gradient, radial_gradient, to_rgba, with_alpha
from leaderboard_config import AURORA_ALPHA
from leaderboard_models import AuroraBackground, GradientBackground, GradientKind, SolidBackground


def gradient_endpoints(kind, width, height):
    """Start and end points of a linear gradient kind; unknown kinds run diagonally."""
    return {
        GradientKind.LEFT_RIGHT.value: ((0, 0), (width, 0)),
        GradientKind.RIGHT_LEFT.value: ((width, 0), (0, 0)),
        GradientKind.TOP_BOTTOM.value: ((0, 0), (0, height)),
        GradientKind.BOTTOM_TOP.value: ((0, height), (0, 0)),
        GradientKind.TOP_LEFT_BOTTOM_RIGHT.value: ((0, 0), (width, height)),
        GradientKind.TOP_RIGHT_BOTTOM_LEFT.value: ((width, 0), (0, height)),
    }.get(str(kind), ((0, 0), (width, height)))


def paint_gradient(surface, background: GradientBackground):
    colors = background.colors
    if not colors:
        return
    if len(colors) == 1:
        surface.fill(colors[0])
        return

    size = (surface.width, surface.height)
    stops = even_stops(colors)
    if background.kind == GradientKind.RADIAL:
        center = (surface.width / 2, surface.height / 2)
        radius = max(surface.width, surface.height) / 2
        paint = radial_gradient(size, center, radius, stops)
    else:
        start, end = gradient_endpoints(background.kind, surface.width, surface.height)
        paint = linear_gradient(size, start, end, stops)
    surface.fill(paint)


def paint_aurora(surface, background: AuroraBackground):
    surface.fill(background.base_color)

    size = (surface.width, surface.height)
    surface.global_alpha = AURORA_ALPHA
    try:
        for spot in background.spots:
            if spot.radius <= 0:
                continue
            color = to_rgba(spot.color)
            glow = radial_gradient(size, (spot.x, spot.y), spot.radius, [(0.0, color), (1.0, with_alpha(color, 0))])
            surface.fill(glow)
    finally:
        surface.global_alpha = 1.0


def paint_background(surface, background):
    if isinstance(background, SolidBackground):
        surface.fill(background.color)
    elif isinstance(background, GradientBackground):
        paint_gradient(surface, background)
    elif isinstance(background, AuroraBackground):
        paint_aurora(surface, background)
    else:
        raise TypeError(f"Unknown background spec: {background!r}")

def image_to_fractal_coords(px, py, center_x, center_y, zoom, image_width,
                            image_height):
    """
    Pixel (px, py) of an image centered on the integer grid point
    (center_x, center_y) -> point of the complex plane.
    The imaginary axis is flipped because image rows grow downwards.
    """
    real = (center_x + px - image_width // 2) / zoom
    imag = -(center_y + py - image_height // 2) / zoom
    return complex(real, imag)


def fractal_to_image_coords(point, center_x, center_y, zoom, image_width,
                            image_height):
    px = round(point.real * zoom) - center_x + image_width // 2
    py = round(-point.imag * zoom) - center_y + image_height // 2
    return int(px), int(py)


def align_down(value: int, step: int) -> int:
    """Largest multiple of step that is <= value (also for negative values)."""
    return value - value % step

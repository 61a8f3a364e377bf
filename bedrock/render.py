#!/usr/bin/python3

"""Render a world's surface as PNG images.

Collect SurfacePoints (see bedrock.decode.iter_points) in a MapImage, then
pass it to a color map's rows method. The resulting rows can be written
directly with a png.Writer of the image's width and height and alpha=True;
write_png does exactly that. Positions without a point stay transparent.
"""

from abc import ABCMeta, abstractmethod
from array import array
from collections import namedtuple
from itertools import chain

from png import Writer as PNGWriter

Bounds = namedtuple('Bounds', 'x z width height')
TRANSPARENT = 0, 0, 0, 0


def parse_color(color):
    """Parse an HTML-style color into an (R, G, B, A) tuple.

    Accepted formats, each with an optional leading hash ("#"):
    RRGGBB, RGB, RRGGBBAA and RGBA.
    """
    color = color.strip().lstrip('#')
    if len(color) in (3, 4):
        color = ''.join(2*c for c in color)
    if len(color) not in (6, 8):
        raise ValueError('invalid color: {!r}'.format(color))
    components = [int(color[i:i+2], 16) for i in range(0, len(color), 2)]
    if len(components) == 3:
        components.append(255)
    return tuple(components)


class MapImage:
    """Hold surface points indexed by their (x, z) world position."""

    def __init__(self, points):
        """Initialise an image from SurfacePoints; later ones win."""
        self.points = {(pt.x, pt.z): pt for pt in points}
        if not self.points:
            raise ValueError('cannot render an image without points')
        xs = [x for x, _ in self.points]
        zs = [z for _, z in self.points]
        self.bounds = Bounds(min(xs), min(zs), max(xs) - min(xs) + 1,
                             max(zs) - min(zs) + 1)

    def grid(self):
        """Generate rows (north to south) of points or None, west to east."""
        b = self.bounds
        for z in range(b.z, b.z + b.height):
            yield [self.points.get((x, z)) for x in range(b.x, b.x + b.width)]


class ColorMap(metaclass=ABCMeta):
    """The base color map. Subclasses override color(point)."""

    @abstractmethod
    def color(self, point):
        """Return an (R, G, B, A) tuple for a SurfacePoint."""
        return NotImplemented

    def rows(self, image):
        """Transform a MapImage into pixel rows to write to a PNG file."""
        for row in image.grid():
            yield array('B', chain.from_iterable(
                TRANSPARENT if pt is None else self.color(pt) for pt in row))


class HeightColorMap(ColorMap):
    """Greyscale by height: the lowest point is black, the highest white."""

    def __init__(self, min_height, max_height):
        """Initialise a color map spanning min_height to max_height."""
        self.min_height, self.max_height = min_height, max_height

    @classmethod
    def for_image(cls, image, min_height=None, max_height=None):
        """Create a color map spanning the heights found in image."""
        heights = [pt.height for pt in image.points.values()]
        return cls(min(heights) if min_height is None else min_height,
                   max(heights) if max_height is None else max_height)

    def color(self, point):
        span = self.max_height - self.min_height
        value = (point.height - self.min_height) / span if span else 0
        grey = round(255 * min(max(value, 0), 1))
        return grey, grey, grey, 255


class BiomeColorMap(ColorMap):
    """A user-defined color map from biome ids to colors.

    colors maps biome ids (as strings, e.g. a configparser section) to HTML
    colors; the key "default" gives the color of all other biomes.
    """

    def __init__(self, colors):
        """Initialise a new color map."""
        self.default = parse_color(colors.get('default', '#0000'))
        self.colors = {int(k): parse_color(c) for k, c in colors.items()
                       if k.lstrip('-').isdigit()}

    def color(self, point):
        return self.colors.get(point.biome, self.default)


def write_png(outfile, image, colormap):
    """Write image colored by colormap to the binary file object outfile."""
    writer = PNGWriter(width=image.bounds.width, height=image.bounds.height,
                       alpha=True)
    writer.write(outfile, colormap.rows(image))

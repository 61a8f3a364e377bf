#!/usr/bin/python3

"""Extract terrain from a world's dumped LevelDB records."""

import logging
import os
import sys
from argparse import ArgumentParser
from collections import namedtuple
from configparser import (ConfigParser, ExtendedInterpolation,
                          Error as ConfigError)
from functools import partial

from bedrock import (
    Block,
    ColumnCoordinate,
    DecodeError,
    DumpDirectoryStore,
    SurfacePoint,
    dump_record,
    iter_blocks,
    iter_points,
    list_columns,
    read_chunks,
)
from bedrock.render import BiomeColorMap, HeightColorMap, MapImage, write_png

EXTRACT_CHOICES = 'columns', 'surface', 'blocks', 'heightmap', 'biomes'


def parse_column(text):
    """Parse an "X,Z" command-line argument into a ColumnCoordinate."""
    x, z = map(int, text.split(','))
    return ColumnCoordinate(x, z)


def read_config(filename):
    """Read a configuration file, returning a ConfigParser.

    The [options] section overrides command-line defaults and [colors] maps
    biome ids to colors. If filename is -, reads from stdin.
    """
    config = ConfigParser(inline_comment_prefixes=('//',),
                          interpolation=ExtendedInterpolation())
    with (open(filename, 'rt') if filename != '-'
          else sys.stdin) as config_file:
        config.read_file(config_file)
    return config


def handle_args(custom_args=None):
    """Parse and return the script's command-line arguments using argparse.

    Values not given on the command line are taken from the configuration
    file's [options] section, if there is one.
    """
    Args = namedtuple('Args', 'extract_data world_dir output_file columns '
                              'plane keep_going dump min_height max_height '
                              'colors verbose')
    parser = ArgumentParser(description="Extract terrain from a world's "
                                        'dumped LevelDB records.')
    add = parser.add_argument
    add('-d', '--world-dir', metavar='DIR',
        help='The directory holding raw-<hex key>.dat record files.')
    add('-o', '--output-file', metavar='FILE',
        help='The CSV or PNG file to write to. Defaults to stdout.')
    add('-c', '--config', metavar='FILE',
        help='Read defaults for these options from the [options] section, '
             'and biome colors from the [colors] section, of the INI file '
             'FILE. If FILE is -, reads it from stdin.')
    add('-C', '--column', metavar='X,Z', dest='columns', action='append',
        type=parse_column,
        help='Only extract the column at X,Z. May be given more than once. '
             'By default, every column with a surface record is extracted.')
    add('-p', '--plane', metavar='PLANE',
        help='Only extract blocks from one x-z-plane. If passed an integer, '
             'blocks whose y coordinate is equal to PLANE are extracted. If '
             'given an integer preceded by "+" or "-", blocks at an offset of '
             "PLANE from the surface's height are extracted.")
    add('-k', '--keep-going', action='store_true', default=None,
        help='Skip malformed records instead of stopping at the first one.')
    add('--dump', metavar='DIR',
        help='Also write every record read to DIR as raw-<hex key>.dat.')
    add('--min-height', metavar='MIN', type=int,
        help='The height drawn black on a heightmap. Defaults to the lowest '
             'height found.')
    add('--max-height', metavar='MAX', type=int,
        help='The height drawn white on a heightmap. Defaults to the highest '
             'height found.')
    add('-v', '--verbose', action='store_true', help='Log debug messages.')
    add('extract_data', choices=EXTRACT_CHOICES,
        help='The type of data to extract.')
    pargs = parser.parse_args(custom_args)
    if pargs.plane is not None:
        try:
            int(pargs.plane)
        except ValueError:
            parser.error('-p/--plane must be an integer, optionally preceded '
                         'by "+" or "-"')

    # Only ever empty, so get and getint just return the default.
    class EmptyDict(dict):
        def getint(self, _, fallback=None):
            return fallback

        def getboolean(self, _, fallback=None):
            return fallback

    defaults, colors = EmptyDict(), None
    if pargs.config:
        config = read_config(pargs.config)
        if config.has_section('options'):
            defaults = config['options']
        if config.has_section('colors'):
            colors = config['colors']

    def fallback(*choices):
        for choice in choices:
            if choice is not None:
                return choice
        return None

    return Args(
        extract_data=pargs.extract_data,
        world_dir=fallback(pargs.world_dir, defaults.get('world_dir')),
        output_file=fallback(pargs.output_file, defaults.get('output_file')),
        columns=pargs.columns,
        plane=pargs.plane,
        keep_going=fallback(pargs.keep_going,
                            defaults.getboolean('keep_going', fallback=None),
                            False),
        dump=pargs.dump,
        min_height=fallback(pargs.min_height,
                            defaults.getint('min_height', fallback=None)),
        max_height=fallback(pargs.max_height,
                            defaults.getint('max_height', fallback=None)),
        colors=colors,
        verbose=pargs.verbose,
    )


def _abort(err):
    raise err


def select_blocks(chunks, plane):
    """Generate the Blocks of chunks, optionally restricted to one plane."""
    for chunk in chunks:
        blocks = (blk for sub in chunk.subchunks
                  for blk in iter_blocks(chunk.column, sub))
        if not plane:
            yield from blocks
        elif any(map(plane.startswith, '+-')):
            if chunk.surface is None:
                continue
            offsets = {(pt.x, pt.z): pt.height + int(plane)
                       for pt in iter_points(chunk.column, chunk.surface)}
            yield from (blk for blk in blocks
                        if blk.y == offsets[(blk.x, blk.z)])
        else:
            y_coord = int(plane)
            yield from (blk for blk in blocks if blk.y == y_coord)


def select_points(chunks):
    """Generate the SurfacePoints of all chunks that have a surface."""
    for chunk in chunks:
        if chunk.surface is not None:
            yield from iter_points(chunk.column, chunk.surface)


def write_csv(outfile, data_type, data):
    """Write namedtuples of type data_type to outfile as CSV."""
    from csv import QUOTE_NONNUMERIC, DictWriter as CSVDictWriter
    csvwriter = CSVDictWriter(outfile, fieldnames=data_type._fields,
                              quoting=QUOTE_NONNUMERIC)
    csvwriter.writeheader()
    csvwriter.writerows(map(data_type._asdict, data))


def main(custom_args=None):
    """The script's main entry point."""
    try:
        args = handle_args(custom_args)
    except (OSError, ConfigError, ValueError) as err:
        print('Could not read configuration: {}'.format(err), file=sys.stderr)
        return 2
    logging.basicConfig(level=(logging.DEBUG if args.verbose
                               else logging.WARNING),
                        format='%(levelname)s: %(name)s: %(message)s')
    if args.world_dir is None:
        print('No world directory given. Pass -d/--world-dir or set '
              'world_dir in the [options] section of a config file.',
              file=sys.stderr)
        return 2

    try:
        store = DumpDirectoryStore(args.world_dir)
    except OSError as err:
        print('Could not read world directory: {}'.format(err),
              file=sys.stderr)
        return 2
    if args.dump and not os.path.isdir(args.dump):
        print('Dump directory {} does not exist.'.format(args.dump),
              file=sys.stderr)
        return 2
    biome_colors = None
    if args.extract_data == 'biomes':
        try:
            biome_colors = BiomeColorMap(args.colors or {})
        except ValueError as err:
            print('Could not read configuration: {}'.format(err),
                  file=sys.stderr)
            return 2
    on_record = partial(dump_record, args.dump) if args.dump else None
    columns = args.columns or list_columns(store)
    chunks = read_chunks(store, columns, on_record=on_record,
                         on_error=None if args.keep_going else _abort)
    try:
        if args.extract_data in ('heightmap', 'biomes'):
            points = list(select_points(chunks))
            if not points:
                print('No surface records found to render.', file=sys.stderr)
                return 1
            image = MapImage(points)
            colormap = (biome_colors if biome_colors is not None else
                        HeightColorMap.for_image(image, args.min_height,
                                                 args.max_height))
            with (open(args.output_file, 'wb')
                  if args.output_file is not None
                  else sys.stdout.buffer) as outfile:
                write_png(outfile, image, colormap)
            return 0

        if args.extract_data == 'columns':
            data_type, data = ColumnCoordinate, columns
        elif args.extract_data == 'surface':
            data_type, data = SurfacePoint, select_points(chunks)
        else:
            data_type, data = Block, select_blocks(chunks, args.plane)
        with (open(args.output_file, 'wt', newline='')
              if args.output_file is not None
              else sys.stdout) as csvfile:
            write_csv(csvfile, data_type, data)
    except DecodeError as err:
        print('Could not decode record: {}'.format(err), file=sys.stderr)
        return 1
    return 0


def run():
    """Run main, translating interrupts into exit codes."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
    except BrokenPipeError:
        sys.exit(0)     # We were piped into something that crashed.


if __name__ == '__main__':
    run()

from __future__ import annotations
import logging
import os
import sys
from parser import parse_svg_file
from svg_state import SVGState
from document import build_tree
from diagnostics import Diagnostics, DocumentError
from renderer import DocumentWalker

logger = logging.getLogger(__name__)

TRUE_VALUES = ['true', '1', 'yes', 'on']
FALSE_VALUES = ['false', '0', 'no', 'off']

USAGE = """SVG to PNG Converter
Usage: python main.py <svg_file1> [svg_file2] ... [options]

Options:
  -v, --verbose         Print detailed information
  -o, --output PATH     Specify output directory or file
  -w, --width WIDTH     Override output width in pixels
  -h, --height HEIGHT   Override output height in pixels
  -b, --background RGB  Background color as R,G,B (default: 255,255,255)
  -aa, --anti-aliasing  Enable anti-aliasing (default: off)
  --skip-render         Skip rendering (only parse and validate)

Examples:
  python main.py test.svg
  python main.py *.svg -v
  python main.py test.svg -w 800 -h 600
  python main.py test.svg -b 0,0,0"""

def process_svg_file(svg_path: str, output_path: str = None, verbose: bool = False,
                     width: int = None, height: int = None,
                     background: tuple[int, int, int] = (255, 255, 255),
                     skip_render: bool = False, anti_aliasing: bool = False) -> bool:
    if not os.path.exists(svg_path):
        print(f"Error: File not found: {svg_path}")
        return False

    if not svg_path.lower().endswith('.svg'):
        print(f"Warning: {svg_path} does not have .svg extension")

    svg_state = SVGState(parse_svg_file(svg_path))
    if width or height:
        svg_state.set_viewport(width, height)
        svg_state.validate()

    if verbose:
        print(f"\nProcessing: {svg_path}")
        print(f"Viewport: {svg_state.viewport_width}x{svg_state.viewport_height}")
        if svg_state.viewbox:
            print(f"ViewBox: {svg_state.viewbox}")
        svg_state.print_validation_report()

    if not svg_state.is_valid():
        print(f"Error: {svg_path} has validation errors")
        return False

    if output_path is None:
        base_name = os.path.splitext(os.path.basename(svg_path))[0]
        output_path = f"{base_name}.png"

    if skip_render:
        print(f"[OK] Parsed: {svg_path} -> {output_path} (rendering skipped)")
        return True

    diagnostics = Diagnostics()
    try:
        raster = DocumentWalker(diagnostics, anti_aliasing=anti_aliasing).render(build_tree(svg_state))
    except DocumentError as e:
        print(f"Error during rendering: {e}")
        return False

    try:
        raster.to_image(background).save(output_path)
    except OSError as e:
        print(f"Error saving PNG: {e}")
        return False

    if verbose:
        diagnostics.print_report()
        print(f"[OK] Rendered and saved: {output_path}")
    else:
        print(f"[OK] {svg_path} -> {output_path}")
    return True

def _parse_positive_int(value: str, name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer")
    if number <= 0:
        raise ValueError(f"{name} must be positive")
    return number

def _parse_background(value: str) -> tuple[int, int, int]:
    parts = value.split(',')
    if len(parts) != 3:
        raise ValueError("Background must be R,G,B (e.g., 255,255,255)")
    try:
        return tuple(max(0, min(255, int(p.strip()))) for p in parts)
    except ValueError:
        raise ValueError("Background must be R,G,B integers (e.g., 255,255,255)")

def parse_args(args: list[str]) -> dict:
    options = {
        'verbose': False,
        'output': None,
        'width': None,
        'height': None,
        'background': (255, 255, 255),
        'skip_render': False,
        'anti_aliasing': False,
        'files': [],
    }

    i = 0
    while i < len(args):
        arg = args[i]
        value = args[i + 1] if i + 1 < len(args) else None

        if arg in ['-v', '--verbose']:
            options['verbose'] = True
        elif arg in ['-o', '--output', '-w', '--width', '-h', '--height', '-b', '--background']:
            if value is None:
                raise ValueError(f"{arg} requires a value")
            if arg in ['-o', '--output']:
                options['output'] = value
            elif arg in ['-w', '--width']:
                options['width'] = _parse_positive_int(value, "Width")
            elif arg in ['-h', '--height']:
                options['height'] = _parse_positive_int(value, "Height")
            else:
                options['background'] = _parse_background(value)
            i += 1
        elif arg in ['-aa', '--anti-aliasing']:
            options['anti_aliasing'] = True
            if value is not None and value.lower() in TRUE_VALUES + FALSE_VALUES:
                options['anti_aliasing'] = value.lower() in TRUE_VALUES
                i += 1
        elif arg == '--skip-render':
            options['skip_render'] = True
        elif arg.startswith('-'):
            raise ValueError(f"Unknown option: {arg}")
        else:
            options['files'].append(arg)
        i += 1

    return options

def main(argv: list[str] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if len(args) == 0:
        print(USAGE)
        return 0

    try:
        options = parse_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    logging.basicConfig(
        level=logging.INFO if options['verbose'] else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    svg_files = options['files']
    if len(svg_files) == 0:
        print("Error: No SVG files specified")
        return 2

    output_dir = options['output']
    success_count = 0
    for svg_file in svg_files:
        output_path = None
        if output_dir:
            if os.path.isdir(output_dir):
                base_name = os.path.splitext(os.path.basename(svg_file))[0]
                output_path = os.path.join(output_dir, f"{base_name}.png")
            elif len(svg_files) == 1:
                output_path = output_dir
            else:
                print("Warning: -o with multiple files requires a directory, not a file")

        if process_svg_file(svg_file, output_path, options['verbose'], options['width'],
                            options['height'], options['background'], options['skip_render'],
                            options['anti_aliasing']):
            success_count += 1

    logger.info("Processed %d/%d file(s)", success_count, len(svg_files))
    print(f"\nProcessed {success_count}/{len(svg_files)} file(s) successfully")
    return 0 if success_count == len(svg_files) else 1

if __name__ == "__main__":
    sys.exit(main())

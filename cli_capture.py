#!/usr/bin/env python3
"""
CLI runner for the question capture pipeline.

Crops a photo, recognizes the question with adaptive OCR and writes the
cropped image for the tagging workflow.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from api.dependencies import get_capture_session, get_vision_recognizer
from config.recognition import RecognitionConfig, resolve_recognition_config
from core.exceptions import CaptureError
from core.models import DEFAULT_CROP, CropBox, RenderGeometry
from services.recognition_pipeline import build_candidates
from utils.bbox_utils import crop_source_rect
from utils.image_utils import load_editor_image
from utils.text_utils import normalize_math_like_text


def parse_crop(value: str) -> CropBox:
    """Parse "x,y,w,h" into a CropBox."""
    try:
        x, y, w, h = (float(part) for part in value.split(','))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Crop must be x,y,w,h, got '{value}'")
    return CropBox(x=x, y=y, w=w, h=h)


def parse_size(value: str) -> RenderGeometry:
    """Parse "WIDTHxHEIGHT" into a RenderGeometry."""
    try:
        width, height = (float(part) for part in value.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Display size must be WIDTHxHEIGHT, got '{value}'")
    return RenderGeometry(client_width=width, client_height=height)


def _config_for(tier: str = None) -> RecognitionConfig:
    if tier:
        return RecognitionConfig.for_tier(tier)
    return resolve_recognition_config()


async def capture_cli(
    image_path: str,
    crop: CropBox,
    display: RenderGeometry = None,
    tier: str = None,
    direct: bool = False,
    output_path: str = None,
    as_json: bool = False,
    verbose: bool = False
) -> int:
    """Run the capture workflow on one image."""
    path = Path(image_path)
    if not path.exists():
        print(f"❌ Error: File not found: {image_path}")
        return 1

    config = _config_for(tier)
    logger = logging.getLogger("capture") if verbose else None

    recognizer = None
    if direct:
        recognizer = get_vision_recognizer()
        if recognizer is None:
            print("❌ Error: VISION_API_KEY is not set (required with --direct)")
            return 1

    session = get_capture_session(recognizer=recognizer, config=config, logger=logger)

    if not as_json:
        print("=" * 60)
        print(f"Capturing: {image_path}")
        print(f"Tier: {config.tier}")
        print("=" * 60)

    try:
        image = session.load_image(path.read_bytes())
        width, height = image.natural_size
        session.set_geometry(display or RenderGeometry(width, height))
        session.editor.reset(crop)

        result = await session.finish()
    except CaptureError as e:
        print(f"❌ Error: {e}")
        return 1

    if result is None:
        print(f"❌ {session.error_text}")
        return 2

    if output_path is None:
        output_path = str(path.with_name(f"{path.stem}_crop.jpg"))
    Path(output_path).write_bytes(result.captured_image)

    if as_json:
        print(json.dumps({
            'question': result.recognized_question,
            'image': output_path,
            **result.metadata
        }, ensure_ascii=False, indent=2))
        return 0

    print(f"\n✓ Question recognized ({session.attempts} recognition run(s))")
    print("-" * 60)
    print(result.recognized_question)
    print("-" * 60)
    print(f"✓ Cropped image written to: {output_path}")
    return 0


def candidates_cli(image_path: str, crop: CropBox, display: RenderGeometry = None, tier: str = None) -> int:
    """Show the candidate regions adaptive recognition would try."""
    config = _config_for(tier)
    try:
        image = load_editor_image(Path(image_path).read_bytes(), max_edge=config.max_editor_edge)
    except (OSError, CaptureError) as e:
        print(f"❌ Error: {e}")
        return 1

    width, height = image.natural_size
    geometry = display or RenderGeometry(width, height)

    print(f"Image: {width}x{height}  Display: {geometry.client_width:g}x{geometry.client_height:g}")
    print("-" * 60)
    print(f"{'Candidate':<14} {'Box (x, y, w, h)':<34} {'Pixels'}")
    print("-" * 60)
    for candidate in build_candidates(crop, config):
        box = candidate.box
        rect = crop_source_rect(box, geometry, image.natural_size)
        box_str = f"{box.x:.3f}, {box.y:.3f}, {box.w:.3f}, {box.h:.3f}"
        print(f"{candidate.label:<14} {box_str:<34} {rect.sw}x{rect.sh}+{rect.sx}+{rect.sy}")
    return 0


def normalize_cli(input_path: str = None) -> int:
    """Normalize math-like text from a file or stdin."""
    if input_path:
        text = Path(input_path).read_text(encoding='utf-8')
    else:
        text = sys.stdin.read()
    print(normalize_math_like_text(text))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description='Question capture CLI: crop, recognize, export'
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Capture command
    capture_parser = subparsers.add_parser('capture', help='Crop and recognize a question photo')
    capture_parser.add_argument('image', type=str, help='Photo of the question')
    capture_parser.add_argument('--crop', type=parse_crop, default=DEFAULT_CROP, help='Crop box x,y,w,h (normalized)')
    capture_parser.add_argument('--display', type=parse_size, default=None, help='Display size WIDTHxHEIGHT the crop refers to')
    capture_parser.add_argument('--tier', type=str, choices=['standard', 'constrained'], help='Platform tier')
    capture_parser.add_argument('--direct', action='store_true', help='Call the vision model directly instead of the endpoint')
    capture_parser.add_argument('-o', '--output', type=str, help='Output path for the cropped image')
    capture_parser.add_argument('--json', action='store_true', help='Print result as JSON')
    capture_parser.add_argument('-v', '--verbose', action='store_true', help='Log recognition attempts')

    # Candidates command
    candidates_parser = subparsers.add_parser('candidates', help='Show OCR candidate regions for a crop')
    candidates_parser.add_argument('image', type=str, help='Photo of the question')
    candidates_parser.add_argument('--crop', type=parse_crop, default=DEFAULT_CROP, help='Crop box x,y,w,h (normalized)')
    candidates_parser.add_argument('--display', type=parse_size, default=None, help='Display size WIDTHxHEIGHT')
    candidates_parser.add_argument('--tier', type=str, choices=['standard', 'constrained'], help='Platform tier')

    # Normalize command
    normalize_parser = subparsers.add_parser('normalize', help='Normalize LaTeX-ish text to readable math')
    normalize_parser.add_argument('file', type=str, nargs='?', help='Input file (stdin if omitted)')

    args = parser.parse_args()

    if args.command == 'capture':
        if args.verbose:
            logging.basicConfig(level=logging.INFO, format='  [%(name)s] %(message)s')
        sys.exit(asyncio.run(capture_cli(
            image_path=args.image,
            crop=args.crop,
            display=args.display,
            tier=args.tier,
            direct=args.direct,
            output_path=args.output,
            as_json=args.json,
            verbose=args.verbose
        )))
    elif args.command == 'candidates':
        sys.exit(candidates_cli(args.image, args.crop, args.display, args.tier))
    elif args.command == 'normalize':
        sys.exit(normalize_cli(args.file))
    else:
        parser.print_help()


if __name__ == '__main__':
    main()

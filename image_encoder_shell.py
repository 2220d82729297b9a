"""
Image Encoder - Imperative Shell

Handles encoding a raw RGBA buffer into a still image file.
Pure side-effects module - no drawing logic, just I/O operations.

Two routes out of the buffer:
- ffmpeg subprocess: raw RGBA stream on stdin → png / mjpeg / libwebp on stdout
- Pillow: in-process conversion to a PIL.Image for saving or further editing
"""

import os
import subprocess
from pathlib import Path
from typing import Any, List

from PIL import Image  # type: ignore

from raster_types import BYTES_PER_PIXEL, DEFAULT_CODEC, DEFAULT_FFMPEG_PATH, SUPPORTED_CODECS


# ============================================================================
# Validation & Command Building (pure)
# ============================================================================

def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_raw_frame(data: bytes, width: int, height: int) -> None:
    """Check that data is exactly one width x height RGBA frame

    Raises:
        ValueError: If dimensions are not positive integers or the byte
            count does not match width * height * 4
    """
    if not _is_positive_int(width):
        raise ValueError(f"Invalid width: {width!r}")
    if not _is_positive_int(height):
        raise ValueError(f"Invalid height: {height!r}")

    expected = width * height * BYTES_PER_PIXEL
    if len(data) != expected:
        raise ValueError(
            f"Frame size mismatch: expected {expected} bytes for {width}x{height} RGBA, "
            f"got {len(data)}"
        )


def validate_codec(codec: str) -> None:
    if codec not in SUPPORTED_CODECS:
        raise ValueError(f"Invalid codec {codec!r}, expected one of {', '.join(SUPPORTED_CODECS)}")


def build_ffmpeg_command(
    width: int,
    height: int,
    codec: str = DEFAULT_CODEC,
    ffmpeg_path: str = DEFAULT_FFMPEG_PATH
) -> List[str]:
    """Build ffmpeg arguments that encode one raw RGBA frame from stdin

    Pure function that constructs the command; output goes to stdout.

    Returns:
        List of command arguments
    """
    return [
        ffmpeg_path,
        '-hide_banner',
        '-v', 'quiet',

        # Input: one raw RGBA frame on stdin
        '-f', 'rawvideo',
        '-pixel_format', 'rgba',
        '-video_size', f'{width}x{height}',
        '-r', '1',
        '-i', '-',

        # Output: single still image on stdout
        '-f', 'image2',
        '-codec:v', codec,
        '-frames:v', '1',
        '-',
    ]


# ============================================================================
# ffmpeg Encoding (side effects)
# ============================================================================

def _write_output(output: Any, encoded: bytes) -> None:
    if isinstance(output, (str, os.PathLike)):
        Path(output).write_bytes(encoded)
    else:
        output.write(encoded)


def write_image(
    data: bytes,
    output: Any,
    width: int,
    height: int,
    codec: str = DEFAULT_CODEC,
    ffmpeg_path: str = DEFAULT_FFMPEG_PATH,
    verbose: bool = False
) -> None:
    """Encode a raw RGBA frame with ffmpeg and write it to output

    Side effects:
    - Spawns an ffmpeg process
    - Writes the encoded image to output

    Args:
        data: Row-major RGBA bytes, exactly width * height * 4 long
        output: File path, or writable binary file object
        width: Frame width in pixels
        height: Frame height in pixels
        codec: One of SUPPORTED_CODECS
        ffmpeg_path: ffmpeg executable
        verbose: Print a status line when done

    Raises:
        ValueError: If the frame or codec is invalid
        RuntimeError: If ffmpeg is missing or exits with a non-zero status
    """
    validate_raw_frame(data, width, height)
    validate_codec(codec)

    cmd = build_ffmpeg_command(width, height, codec=codec, ffmpeg_path=ffmpeg_path)

    try:
        result = subprocess.run(
            cmd,
            input=bytes(data),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE
        )
    except FileNotFoundError:
        raise RuntimeError(
            f"FFmpeg not found ({ffmpeg_path}). Please install FFmpeg:\n"
            "  macOS: brew install ffmpeg\n"
            "  Linux: apt-get install ffmpeg\n"
            "  Windows: Download from https://ffmpeg.org/"
        )

    if result.returncode != 0:
        stderr = result.stderr.decode('utf-8', errors='replace') if result.stderr else ''
        raise RuntimeError(f"FFmpeg exited with code {result.returncode}: {stderr}".rstrip())

    _write_output(output, result.stdout)

    if verbose:
        print(f"✓ Encoded {width}x{height} frame as {codec} ({len(result.stdout)} bytes)")


# ============================================================================
# Pillow Export (side effects)
# ============================================================================

def buffer_to_image(buffer: Any) -> Image.Image:
    """Copy a PixelBuffer into a Pillow RGBA image

    Args:
        buffer: Object exposing the (height, width, 4) uint8 `unsafe_pixels` array

    Returns:
        Independent PIL Image in RGBA mode
    """
    return Image.fromarray(buffer.unsafe_pixels.copy())


def save_image(buffer: Any, path: str, verbose: bool = False) -> None:
    """Save a PixelBuffer through Pillow

    Side effects:
    - Writes to filesystem

    The format follows the file extension. Formats without an alpha channel
    (e.g. JPEG) receive the RGB channels only.
    """
    image = buffer_to_image(buffer)
    if Path(path).suffix.lower() in ('.jpg', '.jpeg'):
        image = image.convert('RGB')
    image.save(path)

    if verbose:
        print(f"✓ Saved {image.width}x{image.height} image to {path}")

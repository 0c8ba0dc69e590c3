"""Pure OCR transformation helpers used before and after the OCR call."""

import io
from typing import Any

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 50  # White padding around image to prevent edge truncation
MIN_DETECTION_CONFIDENCE = 0.7
SAME_LINE_OVERLAP_RATIO = 0.5


def resize_image_bytes(
    image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION, padding: int = OCR_IMAGE_PADDING
) -> bytes:
    """
    Downscale a receipt photo so its longest side is at most ``max_dimension``.

    EXIF orientation is applied first and a white border of ``padding`` pixels
    is added so text touching the edge is not cut off by the OCR engine.

    Returns:
        JPEG bytes.
    """
    from PIL import Image, ImageOps

    img = ImageOps.exif_transpose(Image.open(io.BytesIO(image_bytes)))

    width, height = img.size
    scale = max_dimension / max(width, height)
    if scale < 1:
        img = img.resize((int(width * scale), int(height * scale)), Image.Resampling.LANCZOS)

    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill="white")

    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


def _y_span(bbox: list[list[float]]) -> tuple[float, float]:
    ys = [point[1] for point in bbox]
    return min(ys), max(ys)


def _same_line(span: tuple[float, float], line_span: tuple[float, float]) -> bool:
    overlap = min(span[1], line_span[1]) - max(span[0], line_span[0])
    if overlap <= 0:
        return False
    smaller_height = min(span[1] - span[0], line_span[1] - line_span[0])
    if smaller_height <= 0:
        return False
    return overlap / smaller_height >= SAME_LINE_OVERLAP_RATIO


def detections_to_full_text(
    detections: list[Any],
    min_confidence: float = MIN_DETECTION_CONFIDENCE,
) -> str:
    """
    Rebuild receipt text from PaddleOCR-style detections.

    Each detection is ``[bbox, [text, confidence]]`` with a 4-point bbox.
    Detections are ordered top to bottom, merged into one line when their
    vertical spans overlap, and ordered left to right within a line.
    """
    boxes: list[tuple[tuple[float, float], float, str]] = []
    for bbox, (text, confidence) in detections:
        if confidence < min_confidence or not str(text).strip():
            continue
        min_x = min(point[0] for point in bbox)
        boxes.append((_y_span(bbox), min_x, str(text).strip()))

    boxes.sort(key=lambda box: (sum(box[0]) / 2, box[1]))

    lines: list[tuple[tuple[float, float], list[tuple[float, str]]]] = []
    for span, min_x, text in boxes:
        if lines and _same_line(span, lines[-1][0]):
            line_span, words = lines[-1]
            words.append((min_x, text))
            lines[-1] = ((min(line_span[0], span[0]), max(line_span[1], span[1])), words)
        else:
            lines.append((span, [(min_x, text)]))

    return "\n".join(" ".join(text for _, text in sorted(words)) for _, words in lines)

"""Face-region suggestions for group-photo import.

This is a heuristic, not a face detector: skin-tone pixels are found
in YCbCr space on a downscaled copy of the photo, grouped on a coarse
grid, and each connected blob with a plausible face shape becomes a
suggested region. Users adjust or add regions before naming them, so
the output only needs to be a reasonable starting point.
"""

import base64
import io
import logging
from collections import deque
from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

ANALYSIS_SIZE = 256
GRID_DIVISIONS = 16
MIN_CELL = 4
SKIN_CELL_RATIO = 0.45
MIN_COMPONENT_CELLS = 2
MAX_REGIONS = 8
# faces are roughly as tall as wide; taller blobs include neck and shoulders
MAX_ASPECT = 1.3
MIN_ASPECT = 0.5
CROP_QUALITY = 80

# Chai & Ngan skin cluster
CB_RANGE = (77, 127)
CR_RANGE = (133, 173)
MIN_LUMA = 40


@dataclass
class FaceRegion:
    """A suggested face box in normalized (0..1) image coordinates."""

    id: str
    x: float
    y: float
    width: float
    height: float
    confidence: float


def _open_image(content: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(content))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Unreadable image: {e}") from e
    return ImageOps.exif_transpose(img).convert('RGB')


def skin_mask(image: Image.Image) -> np.ndarray:
    """Boolean mask of skin-toned pixels."""
    ycbcr = np.asarray(image.convert('YCbCr'), dtype=np.uint8)
    y, cb, cr = ycbcr[..., 0], ycbcr[..., 1], ycbcr[..., 2]
    return (
        (y >= MIN_LUMA)
        & (cb >= CB_RANGE[0]) & (cb <= CB_RANGE[1])
        & (cr >= CR_RANGE[0]) & (cr <= CR_RANGE[1])
    )


def _cell_ratios(mask: np.ndarray, cell: int) -> np.ndarray:
    rows, cols = mask.shape[0] // cell, mask.shape[1] // cell
    trimmed = mask[:rows * cell, :cols * cell].astype(np.float32)
    return trimmed.reshape(rows, cell, cols, cell).mean(axis=(1, 3))


def _components(active: np.ndarray) -> list[list[tuple[int, int]]]:
    seen = np.zeros_like(active, dtype=bool)
    groups = []
    rows, cols = active.shape
    for r in range(rows):
        for c in range(cols):
            if not active[r, c] or seen[r, c]:
                continue
            queue = deque([(r, c)])
            seen[r, c] = True
            cells = []
            while queue:
                cr, cc = queue.popleft()
                cells.append((cr, cc))
                for nr, nc in ((cr + 1, cc), (cr - 1, cc), (cr, cc + 1), (cr, cc - 1)):
                    if 0 <= nr < rows and 0 <= nc < cols and active[nr, nc] and not seen[nr, nc]:
                        seen[nr, nc] = True
                        queue.append((nr, nc))
            groups.append(cells)
    return groups


def detect_face_regions(content: bytes, max_regions: int = MAX_REGIONS) -> list[FaceRegion]:
    """Suggest face regions in an uploaded photo.

    Args:
        content: Encoded image bytes.
        max_regions: Upper bound on suggestions returned.

    Returns:
        Regions sorted by confidence, highest first.

    Raises:
        ValueError: If the bytes are not a readable image.
    """
    image = _open_image(content)
    image.thumbnail((ANALYSIS_SIZE, ANALYSIS_SIZE), Image.Resampling.LANCZOS)
    width, height = image.size

    cell = max(MIN_CELL, min(width, height) // GRID_DIVISIONS)
    ratios = _cell_ratios(skin_mask(image), cell)
    if ratios.size == 0:
        return []

    candidates = []
    for cells in _components(ratios >= SKIN_CELL_RATIO):
        if len(cells) < MIN_COMPONENT_CELLS:
            continue
        rs = [r for r, _ in cells]
        cs = [c for _, c in cells]
        r0, r1, c0, c1 = min(rs), max(rs) + 1, min(cs), max(cs) + 1
        box_w, box_h = (c1 - c0) * cell, (r1 - r0) * cell
        if box_h > box_w * MAX_ASPECT:
            box_h = int(box_w * MAX_ASPECT)
        if box_h < box_w * MIN_ASPECT:
            continue
        x, y = c0 * cell / width, r0 * cell / height
        w, h = box_w / width, box_h / height
        # a blob covering most of the frame is a wall or a close-up, not a face in a group
        if w > 0.9 and h > 0.9:
            continue
        fill = len(cells) / ((r1 - r0) * (c1 - c0))
        density = float(np.mean([ratios[r, c] for r, c in cells]))
        candidates.append((min(1.0, density * fill), x, y, w, h))

    candidates.sort(key=lambda item: item[0], reverse=True)
    regions = [
        FaceRegion(
            id=f"face-{i}",
            x=round(x, 4),
            y=round(y, 4),
            width=round(w, 4),
            height=round(h, 4),
            confidence=round(score, 3),
        )
        for i, (score, x, y, w, h) in enumerate(candidates[:max_regions])
    ]
    logger.info("Suggested %d face regions", len(regions))
    return regions


def crop_region(content: bytes, x: float, y: float, width: float, height: float) -> tuple[str, int, int]:
    """Crop a normalized box out of an image.

    The box is clamped into the image and is at least one pixel.

    Returns:
        A ``data:image/jpeg;base64,`` URL and the crop's pixel size.
    """
    image = _open_image(content)
    img_w, img_h = image.size

    x = min(max(x, 0.0), 1.0)
    y = min(max(y, 0.0), 1.0)
    left = min(int(round(x * img_w)), img_w - 1)
    top = min(int(round(y * img_h)), img_h - 1)
    right = max(left + 1, min(img_w, int(round((x + max(width, 0.0)) * img_w))))
    bottom = max(top + 1, min(img_h, int(round((y + max(height, 0.0)) * img_h))))

    crop = image.crop((left, top, right, bottom))
    buf = io.BytesIO()
    crop.save(buf, format='JPEG', quality=CROP_QUALITY)
    encoded = base64.b64encode(buf.getvalue()).decode('ascii')
    return f"data:image/jpeg;base64,{encoded}", crop.width, crop.height

import base64
from io import BytesIO
import pytest
from PIL import Image, ImageDraw
from kinship.extraction import crop_region, detect_face_regions
from kinship.extraction.faces import MAX_REGIONS


def encode(img, fmt='PNG'):
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def photo_with_faces(boxes, size=(400, 300)):
    img = Image.new('RGB', size, (30, 60, 200))
    draw = ImageDraw.Draw(img)
    for box in boxes:
        draw.rectangle(box, fill=(224, 172, 140))
    return encode(img)


def test_single_skin_blob_is_suggested():
    regions = detect_face_regions(photo_with_faces([(100, 60, 180, 160)]))
    assert len(regions) == 1
    region = regions[0]
    assert region.id == 'face-0'
    center_x = region.x + region.width / 2
    center_y = region.y + region.height / 2
    assert center_x == pytest.approx(140 / 400, abs=0.1)
    assert center_y == pytest.approx(110 / 300, abs=0.1)
    assert 0 < region.confidence <= 1


def test_no_skin_no_regions():
    assert detect_face_regions(photo_with_faces([])) == []


def test_regions_sorted_by_confidence_and_capped():
    boxes = [(10 + col * 95, 20 + row * 140, 70 + col * 95, 90 + row * 140) for row in range(2) for col in range(4)]
    regions = detect_face_regions(photo_with_faces(boxes), max_regions=3)
    assert len(regions) == 3
    confidences = [r.confidence for r in regions]
    assert confidences == sorted(confidences, reverse=True)
    assert [r.id for r in regions] == ['face-0', 'face-1', 'face-2']
    assert MAX_REGIONS == 8


def test_full_frame_skin_is_ignored():
    img = Image.new('RGB', (200, 200), (224, 172, 140))
    assert detect_face_regions(encode(img)) == []


def test_unreadable_image():
    with pytest.raises(ValueError):
        detect_face_regions(b'not an image')


def test_crop_region():
    img = Image.new('RGB', (100, 50), (255, 0, 0))
    data_url, width, height = crop_region(encode(img), 0.5, 0.5, 0.5, 0.5)
    assert (width, height) == (50, 25)
    assert data_url.startswith('data:image/jpeg;base64,')
    decoded = Image.open(BytesIO(base64.b64decode(data_url.split(',', 1)[1])))
    assert decoded.format == 'JPEG'
    assert decoded.size == (50, 25)


def test_crop_region_is_clamped():
    img = Image.new('RGB', (100, 50), (0, 255, 0))
    _, width, height = crop_region(encode(img), -0.5, 0.9, 0.2, 0.5)
    assert (width, height) == (20, 5)

    # an empty box still yields one pixel
    _, width, height = crop_region(encode(img), 1.0, 1.0, 0, 0)
    assert (width, height) == (1, 1)

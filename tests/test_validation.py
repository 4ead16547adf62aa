"""Input validation."""

from label_scanner.cross_cutting.validation import (
    validate_image,
    validate_image_count,
    validate_image_file,
)
from label_scanner.domain.value_objects.image_data import ImageData

from conftest import make_image, make_image_bytes


def test_valid_png():
    assert validate_image(make_image("label.png")) == (True, None)


def test_empty_and_corrupt_images():
    ok, message = validate_image(ImageData.from_bytes(b"", filename="a.png"))
    assert not ok and message == "Image is empty"

    ok, message = validate_image(ImageData.from_bytes(b"\x00\x01garbage", filename="a.png"))
    assert not ok and message.startswith("Invalid image data")


def test_size_and_content_type_limits():
    image = make_image("a.png")
    ok, message = validate_image(image, max_file_size=10)
    assert not ok and "exceeds maximum" in message

    pdf = ImageData.from_bytes(make_image_bytes(), filename="a.png", content_type="application/pdf")
    assert validate_image(pdf) == (False, "Unsupported content type: application/pdf")


def test_image_count_bounds():
    images = [make_image(f"{i}.png") for i in range(3)]
    assert validate_image_count(images[:2]) == (True, None)
    assert validate_image_count(images[:1])[0] is False
    assert validate_image_count(images, max_images=2) == (False, "At most 2 images are allowed (got 3)")


def test_image_files(tmp_path):
    good = tmp_path / "front.PNG"
    good.write_bytes(make_image_bytes())
    assert validate_image_file(str(good)) == (True, None)

    assert validate_image_file(str(tmp_path / "missing.png"))[0] is False
    assert validate_image_file(str(tmp_path)) == (False, f"Not a file: {tmp_path}")

    text = tmp_path / "notes.txt"
    text.write_text("hello")
    assert validate_image_file(str(text)) == (False, "Unsupported file format: txt")

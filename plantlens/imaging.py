import base64
from io import BytesIO

import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from plantlens.errors import ImageError, ServiceError

# --- Example photos offered on the upload screen ---
SAMPLE_IMAGES = [
    {
        "name": "Monstera",
        "url": "https://images.unsplash.com/photo-1512428814795-ff5cc5fb5301?auto=format&fit=crop&w=300&q=80",
        "thumbnail": "https://images.unsplash.com/photo-1512428814795-ff5cc5fb5301?auto=format&fit=crop&w=150&q=60",
    },
    {
        "name": "Succulent",
        "url": "https://images.unsplash.com/photo-1459411552884-841db9b3cc2a?auto=format&fit=crop&w=300&q=80",
        "thumbnail": "https://images.unsplash.com/photo-1459411552884-841db9b3cc2a?auto=format&fit=crop&w=150&q=60",
    },
]


def _open(data):
    if not data:
        raise ImageError("No image data")
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageError(f"Unreadable image: {e}") from e
    return img


def to_jpeg_bytes(data, max_side=1536, quality=90):
    """Re-encode uploaded image bytes as an upright RGB JPEG no larger than max_side."""
    img = ImageOps.exif_transpose(_open(data))
    if img.mode != "RGB":
        img = img.convert("RGB")
    img.thumbnail((max_side, max_side))
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def image_data_url(data):
    img = _open(data)
    mime_type = Image.MIME.get(img.format) or f"image/{img.format.lower() if img.format else 'jpeg'}"
    b64_img = base64.b64encode(data).decode()
    return f"data:{mime_type};base64,{b64_img}"


def fetch_sample_image(url, timeout=20):
    """Download one of the example photos. Raises ServiceError if it can't be fetched."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise ServiceError(f"Could not download example image: {e}") from e
    if not response.content:
        raise ServiceError("Example image download was empty")
    return response.content

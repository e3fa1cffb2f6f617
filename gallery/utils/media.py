import base64
import binascii
import logging

LOG = logging.getLogger("gallery.media")


def photo_payload(ref: str | None) -> str | bytes | None:
    """Turn an image reference into something ``send_photo`` accepts.

    External URLs pass through; ``data:`` URLs are decoded to raw bytes.
    Anything else (relative paths, broken data URLs) yields None so the
    caller sends text only.
    """
    if not ref:
        return None
    if ref.startswith(("http://", "https://")):
        return ref
    if ref.startswith("data:"):
        header, sep, data = ref.partition(",")
        if not sep or ";base64" not in header:
            LOG.debug("Unsupported data URL header: %s", header[:40])
            return None
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            LOG.debug("Undecodable data URL: %s", e)
            return None
    return None

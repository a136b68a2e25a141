"""Upload proxy for the comparison backend."""

from .upload_proxy import UploadProxy

__all__ = ["UploadProxy"]

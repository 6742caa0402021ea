from .uploads import UploadStore

__all__ = ["UploadStore"]

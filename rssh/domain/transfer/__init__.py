"""
Transfer domain module
"""
from .models import TransferDirection, TransferDescriptor
from .engine import (
    TransferEngine,
    upload,
    download,
    check_upload_source,
    check_download_destination,
    prepare_download_directory,
    remote_basename,
)

__all__ = [
    "TransferDirection",
    "TransferDescriptor",
    "TransferEngine",
    "upload",
    "download",
    "check_upload_source",
    "check_download_destination",
    "prepare_download_directory",
    "remote_basename",
]

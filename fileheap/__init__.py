"""Client library for the FileHeap content-addressed file storage service."""

from common.models import FileInfo, ManifestPage, Package
from fileheap.client import Client, parse_address
from fileheap.errors import (
    AlreadyUploaded,
    APIError,
    Cancelled,
    FileHeapError,
    FileNotFound,
    IteratorDone,
    ResponseDecodeError,
    TransportError,
)
from fileheap.file import FileRef, WriteOptions
from fileheap.iterator import FileIterator
from fileheap.package import PackageRef
from fileheap.reader import Reader
from fileheap.writer import Writer

__all__ = [
    "AlreadyUploaded",
    "APIError",
    "Cancelled",
    "Client",
    "FileHeapError",
    "FileInfo",
    "FileIterator",
    "FileNotFound",
    "FileRef",
    "IteratorDone",
    "ManifestPage",
    "Package",
    "PackageRef",
    "Reader",
    "ResponseDecodeError",
    "TransportError",
    "WriteOptions",
    "Writer",
    "parse_address",
]

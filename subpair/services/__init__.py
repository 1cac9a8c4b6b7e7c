"""
服务层包
"""

from .collector import CollectionResult, DirectoryCollector, expand_embedded_subtitles
from .metadata_base import MetadataService
from .local_metadata import LocalMetadataService, compute_movie_hash, guess_movie_key
from .upload_base import UploadOutcome, UploadService

__all__ = [
    "CollectionResult",
    "DirectoryCollector",
    "expand_embedded_subtitles",
    "MetadataService",
    "LocalMetadataService",
    "compute_movie_hash",
    "guess_movie_key",
    "UploadOutcome",
    "UploadService",
]

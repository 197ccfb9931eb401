"""Clients for the hosted directory and blob storage services."""
from app.clients.directory import DirectoryClient, DirectoryClientError, SupabaseDirectoryClient
from app.clients.storage import StorageClient, StorageClientError

__all__ = [
    "DirectoryClient",
    "DirectoryClientError",
    "SupabaseDirectoryClient",
    "StorageClient",
    "StorageClientError",
]

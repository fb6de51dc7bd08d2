from voicescribe_common.infrastructure.interfaces import StorageClient

__all__ = ["StorageClient"]

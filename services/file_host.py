"""
ImageKit adapter for timetable documents.

Three capabilities are consumed: upload into a folder, delete by file id and
list a folder. Each returns a RemoteResult; nothing here retries, since a
retried upload can leave two live copies.
"""
import logging

from services.results import RemoteResult

logger = logging.getLogger(__name__)


class ImageKitFileHost:

    def __init__(self, public_key, private_key, url_endpoint):
        self._public_key = public_key
        self._private_key = private_key
        self._url_endpoint = url_endpoint
        self._client = None

    @classmethod
    def from_config(cls, config):
        return cls(
            config.get('IMAGEKIT_PUBLIC_KEY'),
            config.get('IMAGEKIT_PRIVATE_KEY'),
            config.get('IMAGEKIT_URL_ENDPOINT'),
        )

    @property
    def client(self):
        if self._client is None:
            if not (self._public_key and self._private_key and self._url_endpoint):
                raise RuntimeError("ImageKit is not configured. Set IMAGEKIT_PUBLIC_KEY, "
                                   "IMAGEKIT_PRIVATE_KEY and IMAGEKIT_URL_ENDPOINT.")
            from imagekitio import ImageKit
            self._client = ImageKit(
                public_key=self._public_key,
                private_key=self._private_key,
                url_endpoint=self._url_endpoint,
            )
        return self._client

    def upload(self, data, name, folder):
        operation = f"upload {folder}/{name}"
        try:
            from imagekitio.models.UploadFileRequestOptions import UploadFileRequestOptions
            result = self.client.upload_file(
                file=data,
                file_name=name,
                options=UploadFileRequestOptions(folder=folder, use_unique_file_name=True),
            )
        except Exception as e:
            logger.error("File host %s failed: %s", operation, e)
            return RemoteResult.failure(operation, e)
        return RemoteResult.success(operation, {
            'fileId': result.file_id,
            'url': result.url,
            'name': result.name,
        })

    def delete(self, file_id):
        operation = f"delete file {file_id}"
        if not file_id:
            return RemoteResult.failure(operation, 'No file ID provided.')
        try:
            self.client.delete_file(file_id=file_id)
        except Exception as e:
            logger.error("File host %s failed: %s", operation, e)
            return RemoteResult.failure(operation, e)
        return RemoteResult.success(operation)

    def list(self, folder):
        operation = f"list {folder}"
        try:
            from imagekitio.models.ListAndSearchFileRequestOptions import ListAndSearchFileRequestOptions
            result = self.client.list_files(
                options=ListAndSearchFileRequestOptions(path=folder, file_type='all'),
            )
        except Exception as e:
            logger.error("File host %s failed: %s", operation, e)
            return RemoteResult.failure(operation, e)
        files = [
            {'name': item.name, 'url': item.url, 'fileId': item.file_id}
            for item in (result.list or [])
        ]
        return RemoteResult.success(operation, files)

"""
Download service for bill and statement files.
Streams a signed download to disk and verifies its checksum.
"""

import logging
import os

import requests

from ..constants import DOWNLOAD_CHUNK_SIZE, SignVersion
from ..exceptions import CorruptedFileError, TransportError
from ..types import RequestDownload
from ..utils.checksum import checksum_matches, file_checksum, new_hasher
from ..utils.response import ResponseDecoder

logger = logging.getLogger(__name__)


class DownloadService:
    """
    Service for verified file downloads.
    """

    def __init__(self, request_builder, http_client, decoder=None):
        self.request_builder = request_builder
        self.http_client = http_client
        self.decoder = decoder or ResponseDecoder()

    def stream_download(self, request_download: RequestDownload, file_path: str) -> int:
        """
        Download a file and verify it against the expected hash.

        The checksum is computed by reading the written file back from disk,
        not from the network stream. Bytes written before a transport failure
        stay on disk; a file that fails verification is removed.

        Args:
            request_download: Download URL and optional expected hash
            file_path: Destination path, overwritten if it exists

        Returns:
            Number of bytes written

        Raises:
            ValidationError: If hash_type is not supported
            SigningError: If the download request cannot be signed
            TransportError: If the connection fails before or during streaming
            APIError: If the gateway answers with an error status
            CorruptedFileError: If the file does not match hash_value
        """
        logger.info(f"Downloading {request_download.download_url} to {file_path}")

        # Fail on an unknown hash type before touching the network.
        new_hasher(request_download.hash_type)

        signed = self.request_builder.build_signed(
            request_download.download_url,
            'GET',
            version=SignVersion.V1,
        )

        response = self.http_client.send(signed, stream=True)
        try:
            self.decoder.check_status(response)
            written = self._write_stream(response, file_path)
        finally:
            response.close()

        logger.info(f"http stream download file size: {written}")

        checksum, total_size = file_checksum(file_path, request_download.hash_type)

        if request_download.hash_value:
            if not checksum_matches(checksum, request_download.hash_value):
                logger.error(
                    f"Downloaded file is corrupted: {request_download.hash_type} "
                    f"expected {request_download.hash_value}, got {checksum}"
                )
                os.remove(file_path)
                raise CorruptedFileError(
                    f"Downloaded file failed {request_download.hash_type} verification",
                    response_data={
                        'expected': request_download.hash_value,
                        'actual': checksum,
                    }
                )
            logger.info(f"File {request_download.hash_type} checksum verified")

        return total_size

    def _write_stream(self, response: requests.Response, file_path: str) -> int:
        written = 0
        try:
            with open(file_path, 'wb') as fh:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
                        written += len(chunk)
        except requests.RequestException as e:
            logger.error(f"Download interrupted after {written} bytes: {str(e)}")
            raise TransportError(f"Download interrupted: {str(e)}") from e
        return written

"""
Module wrapping the S3 multipart upload API.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import AbortError, CompleteError, SessionCreationError, TransientPartError
from .models import UploadSession

logger = logging.getLogger(__name__)

AWS_ERRORS = (ClientError, BotoCoreError)


class S3ObjectStore:
    """Object store client for S3 multipart uploads."""

    def __init__(self, bucket: str, region: Optional[str] = None,
                 endpoint_url: Optional[str] = None, client: Any = None):
        """Initialize the object store client.

        Args:
            bucket: S3 bucket name
            region: AWS region for the client
            endpoint_url: Optional endpoint for S3-compatible stores
            client: Preconfigured boto3 S3 client, created if omitted
        """
        self.bucket = bucket
        self.s3_client = client or boto3.client(
            's3',
            region_name=region,
            endpoint_url=endpoint_url
        )

    def create_upload(self, key: str, expires: Optional[datetime] = None) -> UploadSession:
        """Start a multipart upload.

        Args:
            key: S3 object key
            expires: Optional expiry for the uploaded object

        Returns:
            UploadSession for the new upload

        Raises:
            SessionCreationError: If S3 rejects the request
        """
        extra_args = {'Expires': expires} if expires else {}
        try:
            response = self.s3_client.create_multipart_upload(
                Bucket=self.bucket,
                Key=key,
                **extra_args
            )
        except AWS_ERRORS as e:
            raise SessionCreationError(
                f"Error creating multipart upload for {key}: {e}"
            ) from e

        session = UploadSession(
            bucket=response.get('Bucket', self.bucket),
            key=response.get('Key', key),
            upload_id=response['UploadId'],
            expires=expires
        )
        logger.debug(f"Created multipart upload {session.upload_id} for {session.key}")
        return session

    def upload_part(self, session: UploadSession, part_number: int, body: bytes) -> str:
        """Upload the bytes of one part.

        Args:
            session: Active upload session
            part_number: 1-based part number
            body: Part data bytes

        Returns:
            ETag of the uploaded part

        Raises:
            TransientPartError: If the upload attempt fails
        """
        try:
            response = self.s3_client.upload_part(
                Bucket=session.bucket,
                Key=session.key,
                UploadId=session.upload_id,
                PartNumber=part_number,
                ContentLength=len(body),
                Body=body
            )
        except AWS_ERRORS as e:
            raise TransientPartError(part_number, str(e)) from e
        return response['ETag']

    def complete_upload(self, session: UploadSession,
                        parts: List[Dict[str, Any]]) -> Optional[str]:
        """Commit the uploaded parts as a single object.

        Args:
            session: Active upload session
            parts: Ordered list of {'PartNumber', 'ETag'} dicts

        Returns:
            Location of the assembled object, if the store reports one

        Raises:
            CompleteError: If S3 rejects the commit
        """
        try:
            response = self.s3_client.complete_multipart_upload(
                Bucket=session.bucket,
                Key=session.key,
                UploadId=session.upload_id,
                MultipartUpload={'Parts': parts}
            )
        except AWS_ERRORS as e:
            raise CompleteError(f"Error completing upload: {e}") from e
        return response.get('Location')

    def abort_upload(self, session: UploadSession) -> None:
        """Discard a multipart upload and its uploaded parts.

        Raises:
            AbortError: If S3 rejects the abort
        """
        try:
            self.s3_client.abort_multipart_upload(
                Bucket=session.bucket,
                Key=session.key,
                UploadId=session.upload_id
            )
        except AWS_ERRORS as e:
            raise AbortError(
                f"Error aborting multipart upload {session.upload_id}: {e}"
            ) from e

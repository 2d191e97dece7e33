#!/usr/bin/env python3
"""
Check storage credentials end to end.

By default creates a timestamped bucket, uploads a greeting object and
prints a presigned URL for it. With --empty, removes every object from
a bucket instead (and the bucket itself with --drop).

Usage:
    python scripts/upload_sample.py
    python scripts/upload_sample.py --empty test-bucket-1700000000000 --drop

Requires:
    - .env file (or environment) with S3 credentials, or S3_MOCK_MODE=true
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from s3_adapter.config.settings import configure_logging, get_settings
from s3_adapter.dependencies import get_object_store
from s3_adapter.infrastructure.storage.errors import BulkDeleteError, StorageError


async def upload_sample(expires_in: int) -> bool:
    store = get_object_store()
    
    try:
        url = await store.upload_sample_file(expires_in=expires_in)
    except StorageError as e:
        print(f"ERROR uploading sample object: {e}")
        return False
    
    print(f"Presigned URL (valid for {expires_in} seconds):\n{url}")
    return True


async def empty_bucket(bucket_name: str, drop: bool) -> bool:
    store = get_object_store()
    
    try:
        result = await store.delete_all_objects(bucket_name)
    except BulkDeleteError as e:
        print(f"[ERR] Stopped after deleting {e.deleted_count} objects: {e.cause}")
        return False
    except StorageError as e:
        print(f"ERROR emptying bucket {bucket_name}: {e}")
        return False
    
    print(f"[OK] Deleted {result.deleted_count} objects across {result.pages} pages")
    
    if drop:
        try:
            await store.delete_bucket(bucket_name)
        except StorageError as e:
            print(f"ERROR deleting bucket {bucket_name}: {e}")
            return False
        print(f"[OK] Deleted bucket {bucket_name}")
    
    return True


def main():
    import argparse
    
    parser = argparse.ArgumentParser(description='Exercise the configured object store')
    parser.add_argument('--empty', metavar='BUCKET', help='Delete every object in BUCKET')
    parser.add_argument('--drop', action='store_true', help='Also delete the bucket after emptying it')
    args = parser.parse_args()
    
    settings = get_settings()
    configure_logging(settings.log_level)
    
    missing = settings.validate_required_fields()
    if missing:
        print(f"ERROR: Missing configuration: {', '.join(missing)}")
        sys.exit(1)
    
    if args.empty:
        success = asyncio.run(empty_bucket(args.empty, drop=args.drop))
    else:
        success = asyncio.run(upload_sample(settings.s3_presign_expiry_seconds))
    
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()

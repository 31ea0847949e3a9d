"""
Management command to download and verify a WeChat Pay bill file.
"""

from django.core.management.base import BaseCommand, CommandError
from wechatpay.constants import HashType
from wechatpay.exceptions import WeChatPayException
from wechatpay.services.base_client import BaseClient
from wechatpay.types import RequestDownload


class Command(BaseCommand):
    help = 'Download a WeChat Pay bill file and verify its checksum'

    def add_arguments(self, parser):
        parser.add_argument(
            '--url',
            type=str,
            required=True,
            help='Download URL returned by the bill API'
        )
        parser.add_argument(
            '--output',
            type=str,
            required=True,
            help='Destination file path'
        )
        parser.add_argument(
            '--hash-value',
            type=str,
            default='',
            help='Expected hex digest (verification skipped if empty)'
        )
        parser.add_argument(
            '--hash-type',
            type=str,
            default=HashType.SHA1.value,
            help='Digest algorithm (default: SHA1)'
        )

    def handle(self, *args, **options):
        request_download = RequestDownload(
            download_url=options['url'],
            hash_type=options['hash_type'],
            hash_value=options['hash_value'],
        )

        self.stdout.write(f"Downloading {request_download.download_url}...")

        client = BaseClient()
        try:
            size = client.stream_download(request_download, options['output'])
        except WeChatPayException as e:
            raise CommandError(f"Download failed: {e.message}")
        finally:
            client.close()

        if request_download.hash_value:
            self.stdout.write(self.style.SUCCESS(
                f"Downloaded {size} bytes to {options['output']} ({request_download.hash_type} verified)"
            ))
        else:
            self.stdout.write(self.style.SUCCESS(
                f"Downloaded {size} bytes to {options['output']} (not verified)"
            ))

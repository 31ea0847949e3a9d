"""
Utility modules for WeChat Pay gateway operations.
"""

from .http_client import HTTPClient
from .canonical import (
    merge_maps,
    filter_empty,
    sorted_query_string,
    encoded_query_string,
    random_nonce
)
from .xml_codec import dict_to_xml, xml_to_dict
from .checksum import file_checksum, checksum_matches
from .response import ResponseDecoder

__all__ = [
    'HTTPClient',
    'merge_maps',
    'filter_empty',
    'sorted_query_string',
    'encoded_query_string',
    'random_nonce',
    'dict_to_xml',
    'xml_to_dict',
    'file_checksum',
    'checksum_matches',
    'ResponseDecoder',
]
